"""tools.nuget.nuspec

Pure parsing of ``.nuspec`` package metadata.

The nuspec XML namespace changes between schema versions
(``.../2010/07/nuspec.xsd``, ``.../2011/08/...``, ``.../2013/05/...``), so
elements are matched by local name only.

Notes:
- ``authors`` / ``owners`` are comma-separated strings; they become trimmed
  tuples. A missing or blank element stays ``None`` (not an empty tuple).
- Dependencies can be flat or grouped by target framework. The same id can
  appear in several groups; the first occurrence wins.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from analyzer_plugins.domain.package import PackageDependency
from analyzer_plugins.domain.version import SemanticVersion, VersionRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NuspecMetadata:
    package_id: str
    version: SemanticVersion
    title: Optional[str] = None
    description: Optional[str] = None
    authors: Optional[Tuple[str, ...]] = None
    owners: Optional[Tuple[str, ...]] = None
    project_url: Optional[str] = None
    license_url: Optional[str] = None
    dependencies: Tuple[PackageDependency, ...] = field(default_factory=tuple)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(parent: ET.Element, name: str) -> Optional[ET.Element]:
    for el in parent:
        if _local(el.tag) == name:
            return el
    return None


def _text(parent: ET.Element, name: str) -> Optional[str]:
    el = _child(parent, name)
    if el is None or el.text is None:
        return None
    s = el.text.strip()
    return s or None


def _split_list(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if raw is None:
        return None
    items = tuple(x.strip() for x in raw.split(",") if x.strip())
    return items or None


def _iter_dependency_elements(deps: ET.Element) -> Iterable[ET.Element]:
    for el in deps:
        name = _local(el.tag)
        if name == "dependency":
            yield el
        elif name == "group":
            for sub in el:
                if _local(sub.tag) == "dependency":
                    yield sub


def _parse_dependencies(metadata: ET.Element) -> Tuple[PackageDependency, ...]:
    deps = _child(metadata, "dependencies")
    if deps is None:
        return ()

    seen: set[str] = set()
    out: List[PackageDependency] = []
    for el in _iter_dependency_elements(deps):
        dep_id = (el.get("id") or "").strip()
        if not dep_id or dep_id.lower() in seen:
            continue
        seen.add(dep_id.lower())

        raw_range = (el.get("version") or "").strip()
        version_range: Optional[VersionRange] = None
        if raw_range:
            try:
                version_range = VersionRange.parse(raw_range)
            except ValueError:
                logger.warning("Ignoring invalid version range %r for dependency %s", raw_range, dep_id)
        out.append(PackageDependency(package_id=dep_id, version_range=version_range))

    return tuple(out)


def parse_nuspec(xml_bytes: bytes) -> NuspecMetadata:
    """Parse nuspec XML. Raises ValueError when id/version are missing or invalid."""
    try:
        root = ET.fromstring(xml_bytes)
    except ET.ParseError as e:
        raise ValueError(f"Malformed nuspec: {e}") from e

    metadata = _child(root, "metadata")
    if metadata is None:
        raise ValueError("nuspec has no <metadata> element")

    package_id = _text(metadata, "id")
    raw_version = _text(metadata, "version")
    if not package_id or not raw_version:
        raise ValueError("nuspec metadata must declare both <id> and <version>")

    return NuspecMetadata(
        package_id=package_id,
        version=SemanticVersion.parse(raw_version),
        title=_text(metadata, "title"),
        description=_text(metadata, "description"),
        authors=_split_list(_text(metadata, "authors")),
        owners=_split_list(_text(metadata, "owners")),
        project_url=_text(metadata, "projectUrl"),
        license_url=_text(metadata, "licenseUrl"),
        dependencies=_parse_dependencies(metadata),
    )


def find_nuspec(package_dir: Path) -> Optional[Path]:
    """Return the nuspec at the root of an extracted package, if any."""
    if not package_dir.is_dir():
        return None
    candidates = sorted(p for p in package_dir.glob("*.nuspec") if p.is_file())
    return candidates[0] if candidates else None


def read_nuspec(path: Path) -> NuspecMetadata:
    return parse_nuspec(Path(path).read_bytes())

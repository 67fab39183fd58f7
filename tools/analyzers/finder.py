"""tools/analyzers/finder.py

Locate analyzer components inside a materialized package.

  package dir -> candidate assemblies -> inspector -> DiscoveredComponent[]

Only assemblies that ship with the package are inspected; the dependency
cache is handed to the inspector purely as a probing path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from analyzer_plugins.domain.component import DiagnosticDescriptor, DiscoveredComponent

from .inspector import parse_inspector_output, resolve_inspector, run_inspector

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "C#"


def find_candidate_assemblies(package_dir: Path) -> List[Path]:
    """All ``*.dll`` files under package_dir, excluding satellite resource assemblies."""
    out: List[Path] = []
    for p in sorted(Path(package_dir).rglob("*.dll")):
        if not p.is_file():
            continue
        if p.name.lower().endswith(".resources.dll"):
            continue
        out.append(p)
    return out


def _as_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}: {value!r}")
    return value


def _component_from_entry(entry: Dict[str, Any]) -> DiscoveredComponent:
    type_name = str(entry.get("type") or "").strip()
    if not type_name:
        raise ValueError(f"Analyzer entry without a type name: {entry!r}")

    raw_diagnostics = entry.get("diagnostics") or []
    if not isinstance(raw_diagnostics, list):
        raise ValueError(f"'diagnostics' of {type_name} must be a list, got {type(raw_diagnostics).__name__}")
    diagnostics = tuple(DiagnosticDescriptor.from_dict(d) for d in raw_diagnostics)
    languages = tuple(str(x) for x in _as_list(entry, "languages") if str(x).strip())

    return DiscoveredComponent(
        assembly_path=Path(str(entry.get("assembly") or "")),
        type_name=type_name,
        languages=languages,
        diagnostics=diagnostics,
    )


def components_from_payload(payload: Dict[str, Any], *, language: Optional[str] = DEFAULT_LANGUAGE) -> List[DiscoveredComponent]:
    for err in _as_list(payload, "errors"):
        if isinstance(err, dict):
            logger.warning("Could not load %s: %s", err.get("assembly"), err.get("message"))

    components: List[DiscoveredComponent] = []
    for entry in _as_list(payload, "analyzers"):
        if not isinstance(entry, dict):
            continue
        comp = _component_from_entry(entry)
        if language and comp.languages and language not in comp.languages:
            logger.debug("Skipping %s: does not target %s", comp.type_name, language)
            continue
        components.append(comp)
    return components


def find_analyzers(
    package_dir: Union[str, Path],
    probe_dir: Union[str, Path],
    *,
    inspector: Optional[str] = None,
    language: Optional[str] = DEFAULT_LANGUAGE,
    timeout_seconds: int = 0,
) -> List[DiscoveredComponent]:
    """Discover analyzers shipped in package_dir.

    Raises RuntimeError when the inspector cannot be run or reports garbage.
    """
    assemblies = find_candidate_assemblies(Path(package_dir))
    logger.debug("Found %d candidate assemblies under %s", len(assemblies), package_dir)
    if not assemblies:
        return []

    try:
        inspector_bin = resolve_inspector(inspector)
    except FileNotFoundError as e:
        raise RuntimeError(str(e)) from e

    res = run_inspector(
        inspector_bin=inspector_bin,
        probe_dir=Path(probe_dir),
        assemblies=assemblies,
        timeout_seconds=timeout_seconds,
    )
    payload = parse_inspector_output(res)

    try:
        return components_from_payload(payload, language=language)
    except ValueError as e:
        raise RuntimeError(f"Analyzer inspector output is malformed: {e}") from e

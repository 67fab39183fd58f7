"""pipeline.manifest

Map a materialized package onto the plugin manifest.

Pure and best-effort: no I/O, and missing package metadata never fails the
mapping. Absent inputs stay absent (``None``) so the packager can omit the
corresponding manifest attributes instead of writing empty ones.
"""

from __future__ import annotations

from typing import Optional, Sequence

from analyzer_plugins.domain.manifest import PluginManifest
from analyzer_plugins.domain.package import MaterializedPackage

__all__ = [
    "PLUGIN_LANGUAGE",
    "build_plugin_manifest",
    "list_to_string",
    "sanitize_manifest_value",
]

# Hard-coded: only C# analyzers are packaged, regardless of what the package
# actually contains.
PLUGIN_LANGUAGE = "cs"

LIST_SEPARATOR = ","


def sanitize_manifest_value(value: Optional[str]) -> Optional[str]:
    """Replace every CR and LF with a single space (idempotent)."""
    if value is None:
        return None
    return value.replace("\r", " ").replace("\n", " ")


def list_to_string(items: Optional[Sequence[str]]) -> Optional[str]:
    """Join with ``,`` (no escaping). ``None`` stays ``None``."""
    if items is None:
        return None
    return LIST_SEPARATOR.join(items)


def build_plugin_manifest(package: MaterializedPackage) -> PluginManifest:
    key = sanitize_manifest_value(package.package_id)

    title = package.title
    if title is not None and title.strip():
        name = sanitize_manifest_value(title)
    else:
        name = key

    return PluginManifest(
        key=key,
        name=name,
        version=package.version.to_normalized_string(),
        language=PLUGIN_LANGUAGE,
        description=sanitize_manifest_value(package.description),
        developers=sanitize_manifest_value(list_to_string(package.authors)),
        organization=sanitize_manifest_value(list_to_string(package.owners)),
        homepage=sanitize_manifest_value(package.project_url),
        license=sanitize_manifest_value(package.license_url),
    )

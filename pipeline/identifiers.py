"""pipeline.identifiers

Pure naming helpers for generated artifacts.
"""

from __future__ import annotations

__all__ = [
    "plugin_jar_name",
]


def plugin_jar_name(package_id: str, version: str) -> str:
    """Archive filename: ``{package_id}-plugin.{version}.jar``.

    ``version`` is the manifest version, i.e. the package's normalized
    version string.

    Examples
    --------
    ("Sample.Analyzers", "1.2.0") -> "Sample.Analyzers-plugin.1.2.0.jar"
    """
    return f"{package_id}-plugin.{version}.jar"

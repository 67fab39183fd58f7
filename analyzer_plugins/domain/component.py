"""analyzer_plugins.domain.component

What discovery yields: analyzer types found inside package assemblies and the
diagnostics each of them declares.

The pipeline itself only counts components; the rule deriver is the one
consumer that looks inside.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """One diagnostic an analyzer can report."""

    diagnostic_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    default_severity: str = "Warning"
    help_link_uri: Optional[str] = None
    custom_tags: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiagnosticDescriptor":
        """Build from the inspector's JSON shape (camelCase keys).

        Raises ValueError when ``data`` is not an object or has no id.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Diagnostic entry must be an object, got {type(data).__name__}: {data!r}")

        diag_id = str(data.get("id") or "").strip()
        if not diag_id:
            raise ValueError(f"Diagnostic entry without an id: {dict(data)!r}")

        tags = data.get("customTags") or []
        if not isinstance(tags, (list, tuple)):
            tags = [tags]

        return cls(
            diagnostic_id=diag_id,
            title=_none_if_blank(data.get("title")),
            description=_none_if_blank(data.get("description")),
            category=_none_if_blank(data.get("category")),
            default_severity=str(data.get("defaultSeverity") or "Warning"),
            help_link_uri=_none_if_blank(data.get("helpLinkUri")),
            custom_tags=tuple(str(t) for t in tags if t is not None and str(t).strip()),
        )


@dataclass(frozen=True)
class DiscoveredComponent:
    """Handle to one analyzer type found in a package."""

    assembly_path: Path
    type_name: str
    languages: Tuple[str, ...] = field(default_factory=tuple)
    diagnostics: Tuple[DiagnosticDescriptor, ...] = field(default_factory=tuple)


def _none_if_blank(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None

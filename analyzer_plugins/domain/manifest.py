"""analyzer_plugins.domain.manifest

Plugin manifest: the identity and display metadata written into the archive.

Every field ends up on a single manifest line, so values must never contain
carriage returns or line feeds. The builder in :mod:`pipeline.manifest`
sanitizes; this type only enforces.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PluginManifest:
    key: str
    name: str
    version: str
    language: str

    description: Optional[str] = None
    developers: Optional[str] = None
    organization: Optional[str] = None
    homepage: Optional[str] = None
    license: Optional[str] = None

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if isinstance(value, str) and ("\r" in value or "\n" in value):
                raise ValueError(f"Manifest field {name!r} must be a single line.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

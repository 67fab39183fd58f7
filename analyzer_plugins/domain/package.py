"""analyzer_plugins.domain.package

Package-side contracts: what the caller asks for and what the acquirer hands
back.

Optional metadata is kept as ``None`` when the package does not supply it.
That distinction matters downstream: the manifest builder maps an absent
author list to an absent ``developers`` field, never to ``""``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .version import SemanticVersion, VersionRange


@dataclass(frozen=True)
class PackageSpecifier:
    """Identifier + version requested by the caller."""

    package_id: str
    version: SemanticVersion

    def __post_init__(self) -> None:
        if not isinstance(self.package_id, str) or not self.package_id.strip():
            raise ValueError("A non-blank package id is required.")

    def describe(self) -> str:
        return f"{self.package_id} {self.version}"


@dataclass(frozen=True)
class PackageDependency:
    package_id: str
    version_range: Optional[VersionRange] = None


@dataclass(frozen=True)
class MaterializedPackage:
    """A package extracted on local storage, with its display metadata."""

    package_id: str
    version: SemanticVersion
    directory: Path

    title: Optional[str] = None
    description: Optional[str] = None
    authors: Optional[Tuple[str, ...]] = None
    owners: Optional[Tuple[str, ...]] = None
    project_url: Optional[str] = None
    license_url: Optional[str] = None

    dependencies: Tuple[PackageDependency, ...] = field(default_factory=tuple)

"""analyzer_plugins.domain.version

NuGet flavoured semantic versions and dependency version ranges.

Package versions are part of two external contracts: the cache folder name
(``<id>.<version>``) and the plugin archive name
(``<id>-plugin.<version>.jar``). Both use the *normalized* string, so
``1.2`` and ``1.2.0.0`` land in the same place.

Comparison follows NuGet rules:

* numeric parts first (major, minor, patch, revision)
* a stable version sorts above any pre-release of the same numbers
* pre-release labels compare identifier by identifier; numeric identifiers
  compare numerically and sort below alphanumeric ones, alphanumeric
  identifiers compare case-insensitively
* build metadata is ignored
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

_IDENT = r"[0-9A-Za-z-]+"

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?(?:\.(?P<revision>\d+))?"
    rf"(?:-(?P<release>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<metadata>{_IDENT}(?:\.{_IDENT})*))?$"
)


def _release_key(release: str) -> Tuple[Any, ...]:
    if not release:
        return (1,)
    parts = []
    for ident in release.split("."):
        if ident.isdigit():
            parts.append((0, int(ident), ""))
        else:
            parts.append((1, 0, ident.lower()))
    return (0, tuple(parts))


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """A package version such as ``1.2.0`` or ``2.0.0-beta.1``."""

    major: int
    minor: int
    patch: int = 0
    revision: int = 0
    release: str = ""
    metadata: str = field(default="", repr=False)

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        raw = (text or "").strip()
        m = _VERSION_RE.match(raw)
        if not m:
            raise ValueError(f"Invalid package version: {text!r}")
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch") or 0),
            revision=int(m.group("revision") or 0),
            release=m.group("release") or "",
            metadata=m.group("metadata") or "",
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.release)

    def to_normalized_string(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            out += f".{self.revision}"
        if self.release:
            out += f"-{self.release}"
        return out

    def _sort_key(self) -> Tuple[Any, ...]:
        return (self.major, self.minor, self.patch, self.revision, _release_key(self.release))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: "SemanticVersion") -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        return self.to_normalized_string()


@dataclass(frozen=True)
class VersionRange:
    """A NuGet dependency range.

    Supported forms::

        1.0          minimum version, inclusive
        [1.0]        exactly 1.0
        [1.0,2.0)    1.0 <= v < 2.0
        (1.0,)       v > 1.0
        (,2.0]       v <= 2.0
    """

    min_version: Optional[SemanticVersion] = None
    min_inclusive: bool = False
    max_version: Optional[SemanticVersion] = None
    max_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        s = (text or "").strip()
        if not s:
            raise ValueError("Empty version range.")

        if s[0] not in "[(":
            return cls(min_version=SemanticVersion.parse(s), min_inclusive=True)

        if len(s) < 2 or s[-1] not in "])":
            raise ValueError(f"Invalid version range: {text!r}")

        min_inclusive = s[0] == "["
        max_inclusive = s[-1] == "]"
        inner = s[1:-1].strip()

        if "," not in inner:
            if not inner or not (min_inclusive and max_inclusive):
                raise ValueError(f"Invalid version range: {text!r}")
            exact = SemanticVersion.parse(inner)
            return cls(min_version=exact, min_inclusive=True, max_version=exact, max_inclusive=True)

        lo, hi = inner.split(",", 1)
        if "," in hi:
            raise ValueError(f"Invalid version range: {text!r}")

        lo, hi = lo.strip(), hi.strip()
        min_version = SemanticVersion.parse(lo) if lo else None
        max_version = SemanticVersion.parse(hi) if hi else None

        if min_version is None and max_version is None:
            raise ValueError(f"Invalid version range: {text!r}")
        if min_version is not None and max_version is not None and max_version < min_version:
            raise ValueError(f"Version range upper bound is below its lower bound: {text!r}")

        return cls(
            min_version=min_version,
            min_inclusive=min_inclusive if min_version is not None else False,
            max_version=max_version,
            max_inclusive=max_inclusive if max_version is not None else False,
        )

    def satisfies(self, version: SemanticVersion) -> bool:
        if self.min_version is not None:
            if self.min_inclusive and version < self.min_version:
                return False
            if not self.min_inclusive and version <= self.min_version:
                return False
        if self.max_version is not None:
            if self.max_inclusive and version > self.max_version:
                return False
            if not self.max_inclusive and version >= self.max_version:
                return False
        return True

    def __str__(self) -> str:
        if (
            self.min_version is not None
            and self.min_inclusive
            and self.max_version is None
        ):
            return str(self.min_version)
        if (
            self.min_version is not None
            and self.min_version == self.max_version
            and self.min_inclusive
            and self.max_inclusive
        ):
            return f"[{self.min_version}]"
        lo = str(self.min_version) if self.min_version is not None else ""
        hi = str(self.max_version) if self.max_version is not None else ""
        return f"{'[' if self.min_inclusive else '('}{lo}, {hi}{']' if self.max_inclusive else ')'}"

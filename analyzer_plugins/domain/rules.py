"""analyzer_plugins.domain.rules

Rule records in the shape the target platform (SonarQube) expects, and the
counted catalog that groups them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

RULE_SEVERITIES = ("INFO", "MINOR", "MAJOR", "CRITICAL", "BLOCKER")

CARDINALITY_SINGLE = "SINGLE"
STATUS_READY = "READY"


@dataclass(frozen=True)
class Rule:
    key: str
    name: str
    internal_key: str
    description: str
    severity: str = "MAJOR"
    cardinality: str = CARDINALITY_SINGLE
    status: str = STATUS_READY
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Rule key must not be empty.")
        if self.severity not in RULE_SEVERITIES:
            raise ValueError(f"Unknown rule severity {self.severity!r} for rule {self.key!r}")


@dataclass(frozen=True)
class RuleCatalog:
    """Ordered, immutable rule collection with unique keys.

    An empty catalog is valid: it means the discovered components declared no
    diagnostics.
    """

    rules: Tuple[Rule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for r in self.rules:
            if r.key in seen:
                raise ValueError(f"Duplicate rule key in catalog: {r.key!r}")
            seen.add(r.key)

    @classmethod
    def from_rules(cls, rules: Sequence[Rule]) -> "RuleCatalog":
        return cls(rules=tuple(rules))

    @property
    def count(self) -> int:
        return len(self.rules)

    def get(self, key: str) -> Optional[Rule]:
        for r in self.rules:
            if r.key == key:
                return r
        return None

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

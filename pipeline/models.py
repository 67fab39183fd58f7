"""pipeline.models

Result types returned by the generation pipeline.

A run has four distinguishable endings (see :class:`GenerationOutcome`). The
historical contract was a single boolean, "was the package found?", and
:attr:`GenerationResult.package_found` still answers exactly that.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from analyzer_plugins.domain.package import MaterializedPackage
from analyzer_plugins.io.workspace import WorkRoots


class GenerationOutcome(str, Enum):
    NOT_FOUND = "not_found"
    FOUND_NO_RULES = "found_no_rules"
    PACKAGING_FAILED = "packaging_failed"
    FOUND_AND_PACKAGED = "found_and_packaged"


@dataclass(frozen=True)
class RulesFileResult:
    success: bool
    component_count: int = 0
    rule_count: int = 0


@dataclass(frozen=True)
class GenerationResult:
    package_id: str
    version: str
    outcome: GenerationOutcome
    package: Optional[MaterializedPackage] = None
    roots: Optional[WorkRoots] = None
    rules_path: Optional[Path] = None
    component_count: int = 0
    rule_count: int = 0
    plugin_path: Optional[Path] = None

    @property
    def package_found(self) -> bool:
        return self.outcome is not GenerationOutcome.NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package_id": self.package_id,
            "version": self.version,
            "outcome": self.outcome.value,
            "package_found": self.package_found,
            "package_dir": str(self.package.directory) if self.package else None,
            "output_dir": str(self.roots.output_dir) if self.roots and self.roots.output_dir else None,
            "rules_path": str(self.rules_path) if self.rules_path else None,
            "component_count": self.component_count,
            "rule_count": self.rule_count,
            "plugin_path": str(self.plugin_path) if self.plugin_path else None,
        }

"""analyzer_plugins.domain

Domain objects that form the *contract* between pipeline stages.

Key idea
--------
Each stage (acquire, discover, derive, package) hands the next one a small,
immutable value. Stages never share mutable state, and nothing here performs
I/O.
"""

from __future__ import annotations

from .component import DiagnosticDescriptor, DiscoveredComponent
from .manifest import PluginManifest
from .package import MaterializedPackage, PackageDependency, PackageSpecifier
from .rules import RULE_SEVERITIES, Rule, RuleCatalog
from .version import SemanticVersion, VersionRange

__all__ = [
    "DiagnosticDescriptor",
    "DiscoveredComponent",
    "MaterializedPackage",
    "PackageDependency",
    "PackageSpecifier",
    "PluginManifest",
    "RULE_SEVERITIES",
    "Rule",
    "RuleCatalog",
    "SemanticVersion",
    "VersionRange",
]

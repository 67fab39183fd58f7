"""pipeline.stages

Registry of the collaborators the pipeline drives.

The orchestrator never imports a concrete acquirer, inspector, rule deriver,
writer or packager. It receives a :class:`PipelineStages` bundle of callables
instead, and :func:`default_stages` is the one place that binds the real
implementations under ``tools/`` to configuration.

Call contracts
--------------
fetch(source_url, package_id, version, cache_dir) -> MaterializedPackage | None
discover(package_dir, cache_dir) -> Sequence[DiscoveredComponent]
derive(components) -> RuleCatalog | None
save_rules(catalog, path) -> Any
package(manifest, rules_path, archive_path) -> Any

Tests substitute plain functions for any of these.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from analyzer_plugins.domain.component import DiscoveredComponent
from analyzer_plugins.domain.manifest import PluginManifest
from analyzer_plugins.domain.package import MaterializedPackage
from analyzer_plugins.domain.rules import RuleCatalog
from analyzer_plugins.domain.version import SemanticVersion
from pipeline.config import GeneratorConfig
from tools.analyzers import find_analyzers
from tools.jar import build_plugin_jar
from tools.nuget import fetch_package
from tools.rules import generate_rules, save_rules_xml

FetchFn = Callable[[str, str, SemanticVersion, Path], Optional[MaterializedPackage]]
DiscoverFn = Callable[[Path, Path], Sequence[DiscoveredComponent]]
DeriveFn = Callable[[Sequence[DiscoveredComponent]], Optional[RuleCatalog]]
SaveRulesFn = Callable[[RuleCatalog, Path], Any]
PackageFn = Callable[[PluginManifest, Path, Path], Any]


@dataclass(frozen=True)
class PipelineStages:
    fetch: FetchFn
    discover: DiscoverFn
    derive: DeriveFn
    save_rules: SaveRulesFn
    package: PackageFn


def default_stages(config: Optional[GeneratorConfig] = None) -> PipelineStages:
    """Wire the NuGet, inspector, rules.xml and jar implementations."""
    cfg = config or GeneratorConfig()
    return PipelineStages(
        fetch=partial(fetch_package, timeout_seconds=cfg.http_timeout_seconds),
        discover=partial(
            find_analyzers,
            inspector=cfg.inspector,
            timeout_seconds=cfg.inspector_timeout_seconds,
        ),
        derive=generate_rules,
        save_rules=save_rules_xml,
        package=build_plugin_jar,
    )

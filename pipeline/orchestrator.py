"""pipeline.orchestrator

High-level entrypoints for generating one analyzer plugin.

Flow
----
1. validate the request (blank package id -> ValueError, before any I/O)
2. prepare work roots (shared cache, base dir under the temp root)
3. fetch the package; absent -> NOT_FOUND, nothing else happens
4. allocate a fresh output directory (failure is fatal)
5. discover analyzers, derive rules, write rules.xml
6. on success only: build the manifest and package the plugin archive

The run "succeeds" in the historical sense whenever the package was found,
even if no rules or no archive came out of it. :class:`GenerationOutcome`
tells those cases apart.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from analyzer_plugins.domain.package import PackageSpecifier
from analyzer_plugins.domain.version import SemanticVersion
from analyzer_plugins.io.workspace import prepare_work_roots
from pipeline.config import GeneratorConfig
from pipeline.identifiers import plugin_jar_name
from pipeline.manifest import build_plugin_manifest
from pipeline.models import GenerationOutcome, GenerationResult
from pipeline.rules_file import STAGE_ERRORS, generate_rules_file
from pipeline.stages import PipelineStages, default_stages
from tools.nuget.types import DEFAULT_PACKAGE_SOURCE

logger = logging.getLogger(__name__)


def generate_plugin(
    *,
    package_id: str,
    version: SemanticVersion,
    stages: Optional[PipelineStages] = None,
    package_source: str = DEFAULT_PACKAGE_SOURCE,
    tool_name: Optional[str] = None,
    temp_root: Union[str, Path, None] = None,
    output_dir: Union[str, Path, None] = None,
) -> GenerationResult:
    """Run the full pipeline for one package.

    ``output_dir`` is where the plugin archive lands (default: the current
    working directory). Raises ValueError for a blank package id and
    RuntimeError when working directories cannot be created.
    """
    request = PackageSpecifier(package_id=package_id, version=version)
    stages = stages or default_stages()

    roots = prepare_work_roots(tool_name, temp_root=temp_root)
    logger.debug("Base directory: %s", roots.base_dir)
    logger.debug("Package cache: %s", roots.cache_dir)

    logger.info("Retrieving package %s", request.describe())
    package = stages.fetch(package_source, request.package_id, request.version, roots.cache_dir)
    if package is None:
        logger.info("Package %s was not found", request.describe())
        return GenerationResult(
            package_id=request.package_id,
            version=str(request.version),
            outcome=GenerationOutcome.NOT_FOUND,
            roots=roots,
        )

    roots = roots.with_output_dir()
    rules_path = roots.rules_path
    logger.debug("Output directory: %s", roots.output_dir)

    result_fields = dict(
        package_id=request.package_id,
        version=str(request.version),
        package=package,
        roots=roots,
    )

    package_dir = Path(package.directory)
    if not package_dir.is_dir():
        logger.error("Materialized package directory does not exist: %s", package_dir)
        return GenerationResult(outcome=GenerationOutcome.FOUND_NO_RULES, **result_fields)

    logger.info("Generating rules for %s", request.describe())
    rules = generate_rules_file(
        package_dir=package_dir,
        cache_dir=roots.cache_dir,
        output_path=rules_path,
        stages=stages,
    )
    result_fields["component_count"] = rules.component_count
    if not rules.success:
        return GenerationResult(outcome=GenerationOutcome.FOUND_NO_RULES, **result_fields)

    result_fields["rules_path"] = rules_path
    result_fields["rule_count"] = rules.rule_count

    manifest = build_plugin_manifest(package)
    archive_dir = Path(output_dir) if output_dir is not None else Path.cwd()
    archive_path = archive_dir / plugin_jar_name(request.package_id, manifest.version)

    logger.info("Packaging plugin %s", archive_path.name)
    try:
        stages.package(manifest, rules_path, archive_path)
    except STAGE_ERRORS as e:
        logger.error("Could not package plugin %s: %s", archive_path, e)
        return GenerationResult(outcome=GenerationOutcome.PACKAGING_FAILED, **result_fields)

    logger.info("Plugin written to %s", archive_path)
    return GenerationResult(
        outcome=GenerationOutcome.FOUND_AND_PACKAGED,
        plugin_path=archive_path,
        **result_fields,
    )


def generate_plugin_with_config(
    *,
    package_id: str,
    version: SemanticVersion,
    config: GeneratorConfig,
    tool_name: Optional[str] = None,
    output_dir: Union[str, Path, None] = None,
) -> GenerationResult:
    return generate_plugin(
        package_id=package_id,
        version=version,
        stages=default_stages(config),
        package_source=config.package_source,
        tool_name=tool_name,
        temp_root=config.temp_root,
        output_dir=output_dir,
    )


def run(package_id: str, version: SemanticVersion, **kwargs) -> bool:
    """Boolean entrypoint: True when the package was found."""
    return generate_plugin(package_id=package_id, version=version, **kwargs).package_found

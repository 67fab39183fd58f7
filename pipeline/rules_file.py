"""pipeline.rules_file

Discover -> derive -> save, for one materialized package.

Any failure in these three stages is reported as an unsuccessful
:class:`RulesFileResult`; nothing here raises for collaborator errors. The
orchestrator decides what an unsuccessful result means for the run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pipeline.models import RulesFileResult
from pipeline.stages import PipelineStages

logger = logging.getLogger(__name__)

# Errors a collaborator may raise that should not abort the run.
STAGE_ERRORS = (OSError, RuntimeError, ValueError)


def generate_rules_file(
    *,
    package_dir: Path,
    cache_dir: Path,
    output_path: Path,
    stages: PipelineStages,
) -> RulesFileResult:
    try:
        components = list(stages.discover(package_dir, cache_dir))
    except STAGE_ERRORS as e:
        logger.error("Analyzer discovery failed for %s: %s", package_dir, e)
        return RulesFileResult(success=False)

    if not components:
        logger.warning("No analyzers found in %s", package_dir)
        return RulesFileResult(success=False)

    logger.info("Found %d analyzer(s)", len(components))

    try:
        catalog = stages.derive(components)
    except STAGE_ERRORS as e:
        logger.error("Rule generation failed: %s", e)
        return RulesFileResult(success=False, component_count=len(components))

    if catalog is None:
        logger.error("Rule generator returned no catalog for %d analyzer(s)", len(components))
        return RulesFileResult(success=False, component_count=len(components))

    try:
        stages.save_rules(catalog, output_path)
    except STAGE_ERRORS as e:
        logger.error("Could not write rules file %s: %s", output_path, e)
        return RulesFileResult(success=False, component_count=len(components))

    logger.debug("%d rules generated, written to %s", catalog.count, output_path)
    return RulesFileResult(success=True, component_count=len(components), rule_count=catalog.count)

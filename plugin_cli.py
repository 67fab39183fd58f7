#!/usr/bin/env python3
"""
Generate a SonarQube plugin from the Roslyn analyzers in a NuGet package.

Usage:
  python plugin_cli.py Sample.Analyzers 1.2.0
  python plugin_cli.py Sample.Analyzers 1.2.0 --source https://my.feed/api/v2/ --output-dir dist
  python plugin_cli.py Sample.Analyzers 1.2.0 --inspector ./bin/roslyn-analyzer-inspector -v

Exit codes:
  0  package found (see the printed outcome for whether a plugin was written)
  1  package not found
  2  invalid arguments
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from analyzer_plugins.domain.version import SemanticVersion
from analyzer_plugins.io.fs import write_json_atomic
from pipeline.config import load_config
from pipeline.models import GenerationOutcome
from pipeline.orchestrator import generate_plugin_with_config

OUTCOME_LABELS = {
    GenerationOutcome.NOT_FOUND: "package not found",
    GenerationOutcome.FOUND_NO_RULES: "package found, no rules generated",
    GenerationOutcome.PACKAGING_FAILED: "rules generated, packaging failed",
    GenerationOutcome.FOUND_AND_PACKAGED: "plugin generated",
}


def _version_arg(text: str) -> SemanticVersion:
    try:
        return SemanticVersion.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _package_id_arg(text: str) -> str:
    if not text.strip():
        raise argparse.ArgumentTypeError("package id must not be blank")
    return text.strip()


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a SonarQube rules plugin from the analyzers in a NuGet package.",
    )
    parser.add_argument("package_id", type=_package_id_arg, help="NuGet package id, e.g. Sample.Analyzers")
    parser.add_argument("version", type=_version_arg, help="Package version, e.g. 1.2.0")
    parser.add_argument("--source", help="NuGet v2 feed URL (default: NUGET_PACKAGE_SOURCE or nuget.org)")
    parser.add_argument("--inspector", help="Path or name of the analyzer inspector executable")
    parser.add_argument(
        "--inspector-timeout",
        type=_non_negative_int,
        default=None,
        help="Seconds before the inspector is killed (0 = no timeout)",
    )
    parser.add_argument("--output-dir", help="Directory for the plugin .jar (default: current directory)")
    parser.add_argument("--summary-json", help="Also write the run result as JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(
        package_source=args.source,
        inspector=args.inspector,
        inspector_timeout_seconds=args.inspector_timeout,
    )

    print("\n🚀 Generating plugin")
    print(f"  Package : {args.package_id} {args.version}")
    print(f"  Source  : {cfg.package_source}")

    result = generate_plugin_with_config(
        package_id=args.package_id,
        version=args.version,
        config=cfg,
        output_dir=args.output_dir,
    )

    if args.summary_json:
        write_json_atomic(args.summary_json, result.to_dict())

    label = OUTCOME_LABELS[result.outcome]
    if result.outcome is GenerationOutcome.FOUND_AND_PACKAGED:
        print(f"\n✅ {label.capitalize()}.")
    else:
        print(f"\n⚠️ {label.capitalize()}.")
    print(f"  Rules   : {result.rule_count}")
    if result.rules_path:
        print(f"  Rules file : {result.rules_path}")
    if result.plugin_path:
        print(f"  Plugin  : {result.plugin_path}")

    return 0 if result.package_found else 1


if __name__ == "__main__":
    sys.exit(main())

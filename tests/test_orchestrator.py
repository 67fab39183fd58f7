from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import List
from unittest import mock

import pytest

from analyzer_plugins.domain.component import DiagnosticDescriptor, DiscoveredComponent
from analyzer_plugins.domain.package import MaterializedPackage
from analyzer_plugins.domain.version import SemanticVersion
from analyzer_plugins.io.workspace import OUTPUT_DIRNAME
from pipeline.models import GenerationOutcome
from pipeline.orchestrator import generate_plugin, run
from pipeline.stages import PipelineStages
from tools.analyzers.finder import find_analyzers
from tools.core_cmd import CmdResult
from tools.jar import build_plugin_jar
from tools.rules import generate_rules, load_rules_xml, save_rules_xml

TOOL = "plugin-gen-test"
VERSION = SemanticVersion.parse("1.2.0")


def _fake_fetch(source_url: str, package_id: str, version: SemanticVersion, cache_dir: Path) -> MaterializedPackage:
    directory = Path(cache_dir) / f"{package_id}.{version}"
    directory.mkdir(parents=True, exist_ok=True)
    return MaterializedPackage(
        package_id=package_id,
        version=version,
        directory=directory,
        title="Sample Analyzers",
        authors=("Alice", "Bob"),
    )


def _components(n: int) -> List[DiscoveredComponent]:
    return [
        DiscoveredComponent(
            assembly_path=Path("/pkg/Sample.Analyzers.dll"),
            type_name=f"Sample.Analyzer{i}",
            languages=("C#",),
            diagnostics=(DiagnosticDescriptor(diagnostic_id=f"SA{i:04d}", title=f"Rule {i}"),),
        )
        for i in range(n)
    ]


def _stages(**overrides) -> PipelineStages:
    fields = dict(
        fetch=_fake_fetch,
        discover=mock.Mock(return_value=_components(3)),
        derive=generate_rules,
        save_rules=save_rules_xml,
        package=build_plugin_jar,
    )
    fields.update(overrides)
    return PipelineStages(**fields)


def test_end_to_end_writes_rules_and_plugin_in_working_directory(tmp_path: Path, monkeypatch) -> None:
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=_stages(),
        tool_name=TOOL,
        temp_root=tmp_path / "tmp",
    )

    assert result.outcome is GenerationOutcome.FOUND_AND_PACKAGED
    assert result.package_found
    assert result.rule_count == 3
    assert result.component_count == 3

    assert result.rules_path is not None and result.rules_path.is_file()
    assert result.rules_path.parent.parent == tmp_path / "tmp" / TOOL / OUTPUT_DIRNAME
    assert load_rules_xml(result.rules_path).count == 3

    jar = workdir / "Sample.Analyzers-plugin.1.2.0.jar"
    assert result.plugin_path == jar
    assert jar.is_file()
    with zipfile.ZipFile(jar) as zf:
        assert "resources/rules.xml" in zf.namelist()


def test_blank_package_id_is_rejected_before_any_io(tmp_path: Path) -> None:
    fetch = mock.Mock()
    for blank in ["", "   ", "\t\n"]:
        with mock.patch("pipeline.orchestrator.prepare_work_roots") as prepare:
            with pytest.raises(ValueError):
                generate_plugin(
                    package_id=blank,
                    version=VERSION,
                    stages=_stages(fetch=fetch),
                    tool_name=TOOL,
                    temp_root=tmp_path,
                )
            prepare.assert_not_called()
    fetch.assert_not_called()
    assert list(tmp_path.iterdir()) == []


def test_not_found_returns_false_and_allocates_no_output(tmp_path: Path) -> None:
    discover = mock.Mock()
    package = mock.Mock()
    stages = _stages(fetch=mock.Mock(return_value=None), discover=discover, package=package)

    assert run("Missing.Package", VERSION, stages=stages, tool_name=TOOL, temp_root=tmp_path, output_dir=tmp_path) is False

    assert not (tmp_path / TOOL / OUTPUT_DIRNAME).exists()
    discover.assert_not_called()
    package.assert_not_called()


def test_zero_components_is_found_without_rules_or_plugin(tmp_path: Path) -> None:
    out = tmp_path / "dist"
    package = mock.Mock()
    stages = _stages(discover=mock.Mock(return_value=[]), package=package)

    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=stages,
        tool_name=TOOL,
        temp_root=tmp_path,
        output_dir=out,
    )

    assert result.package_found
    assert result.outcome is GenerationOutcome.FOUND_NO_RULES
    assert result.rules_path is None
    assert not result.roots.rules_path.exists()
    assert not out.exists()
    package.assert_not_called()

    assert run("Sample.Analyzers", VERSION, stages=stages, tool_name=TOOL, temp_root=tmp_path, output_dir=out) is True


def test_consecutive_runs_use_distinct_output_dirs(tmp_path: Path) -> None:
    kwargs = dict(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=_stages(),
        tool_name=TOOL,
        temp_root=tmp_path,
        output_dir=tmp_path / "dist",
    )
    first = generate_plugin(**kwargs)
    second = generate_plugin(**kwargs)

    assert first.rules_path != second.rules_path
    assert first.rules_path.is_file() and second.rules_path.is_file()
    # The cache is shared between the two runs.
    assert first.roots.cache_dir == second.roots.cache_dir


def test_packaging_failure_is_absorbed(tmp_path: Path) -> None:
    stages = _stages(package=mock.Mock(side_effect=OSError("disk full")))
    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=stages,
        tool_name=TOOL,
        temp_root=tmp_path,
        output_dir=tmp_path / "dist",
    )

    assert result.outcome is GenerationOutcome.PACKAGING_FAILED
    assert result.package_found
    assert result.rules_path.is_file()
    assert result.plugin_path is None


def test_packager_receives_manifest_rules_path_and_archive_name(tmp_path: Path) -> None:
    package = mock.Mock()
    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=SemanticVersion.parse("1.2"),
        stages=_stages(package=package),
        tool_name=TOOL,
        temp_root=tmp_path,
        output_dir=tmp_path / "dist",
    )

    manifest, rules_path, archive_path = package.call_args.args
    assert manifest.key == "Sample.Analyzers"
    assert manifest.name == "Sample Analyzers"
    assert manifest.developers == "Alice,Bob"
    assert manifest.version == "1.2.0"
    assert rules_path == result.rules_path
    assert archive_path == tmp_path / "dist" / "Sample.Analyzers-plugin.1.2.0.jar"


def test_missing_package_directory_skips_rule_generation(tmp_path: Path) -> None:
    def fetch_without_dir(source_url, package_id, version, cache_dir):
        return MaterializedPackage(package_id=package_id, version=version, directory=Path(cache_dir) / "gone")

    discover = mock.Mock()
    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=_stages(fetch=fetch_without_dir, discover=discover),
        tool_name=TOOL,
        temp_root=tmp_path,
    )

    assert result.outcome is GenerationOutcome.FOUND_NO_RULES
    discover.assert_not_called()


def test_output_directory_failure_is_fatal(tmp_path: Path) -> None:
    base = tmp_path / TOOL
    base.mkdir()
    (base / OUTPUT_DIRNAME).write_text("blocks the output namespace")

    with pytest.raises(RuntimeError):
        generate_plugin(
            package_id="Sample.Analyzers",
            version=VERSION,
            stages=_stages(),
            tool_name=TOOL,
            temp_root=tmp_path,
        )


def test_fetch_receives_source_and_cache_dir(tmp_path: Path) -> None:
    fetch = mock.Mock(return_value=None)
    generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=_stages(fetch=fetch),
        package_source="https://feed.example/api/v2/",
        tool_name=TOOL,
        temp_root=tmp_path,
    )
    fetch.assert_called_once_with(
        "https://feed.example/api/v2/", "Sample.Analyzers", VERSION, tmp_path / TOOL / ".nuget"
    )


def test_components_without_diagnostics_still_produce_a_plugin(tmp_path: Path) -> None:
    silent = [
        DiscoveredComponent(assembly_path=Path("/pkg/Sample.Analyzers.dll"), type_name="Sample.Quiet", languages=("C#",))
    ]
    result = generate_plugin(
        package_id="Sample.Analyzers",
        version=VERSION,
        stages=_stages(discover=mock.Mock(return_value=silent)),
        tool_name=TOOL,
        temp_root=tmp_path,
        output_dir=tmp_path / "dist",
    )

    assert result.outcome is GenerationOutcome.FOUND_AND_PACKAGED
    assert result.component_count == 1
    assert result.rule_count == 0
    assert load_rules_xml(result.rules_path).count == 0
    assert result.plugin_path == tmp_path / "dist" / "Sample.Analyzers-plugin.1.2.0.jar"
    assert result.plugin_path.is_file()


def test_garbled_inspector_output_is_absorbed(tmp_path: Path) -> None:
    def fetch_with_assembly(source_url, package_id, version, cache_dir):
        package = _fake_fetch(source_url, package_id, version, cache_dir)
        dll = package.directory / "analyzers" / "dotnet" / "cs" / f"{package_id}.dll"
        dll.parent.mkdir(parents=True, exist_ok=True)
        dll.write_bytes(b"MZ")
        return package

    payload = {"analyzers": [{"type": "Foo.A", "languages": ["C#"], "diagnostics": ["FOO001"]}]}
    inspector_out = CmdResult(
        exit_code=0, elapsed_seconds=0.1, command_str="inspector", stdout=json.dumps(payload), stderr=""
    )
    package = mock.Mock()
    with mock.patch("tools.analyzers.finder.resolve_inspector", return_value="/bin/inspector"), mock.patch(
        "tools.analyzers.finder.run_inspector", return_value=inspector_out
    ):
        result = generate_plugin(
            package_id="Sample.Analyzers",
            version=VERSION,
            stages=_stages(fetch=fetch_with_assembly, discover=find_analyzers, package=package),
            tool_name=TOOL,
            temp_root=tmp_path,
        )

    assert result.package_found
    assert result.outcome is GenerationOutcome.FOUND_NO_RULES
    assert result.rules_path is None
    package.assert_not_called()

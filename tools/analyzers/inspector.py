"""tools/analyzers/inspector.py

Tool-specific execution plumbing for the analyzer inspector.

Loading .NET assemblies and reflecting over ``DiagnosticAnalyzer`` types has
to happen inside a .NET runtime, so discovery is delegated to an external
executable. The contract with that executable is small:

    <inspector> --probe-dir <dir> --json <assembly> [<assembly> ...]

It prints one JSON document on stdout::

    {
      "analyzers": [
        {
          "assembly": "/abs/path/Foo.Analyzers.dll",
          "type": "Foo.Analyzers.NamingAnalyzer",
          "languages": ["C#"],
          "diagnostics": [
            {"id": "FOO001", "title": "...", "description": "...",
             "category": "Naming", "defaultSeverity": "Warning",
             "helpLinkUri": "...",
             "customTags": ["Telemetry"]}
          ]
        }
      ],
      "errors": [{"assembly": "...", "message": "..."}]
    }

``--probe-dir`` is where the inspector resolves assembly references that are
not bundled with the package itself.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from tools.core_cmd import CmdResult, run_cmd, which_or_raise

DEFAULT_INSPECTOR = "roslyn-analyzer-inspector"


def resolve_inspector(inspector: Optional[str] = None) -> str:
    return which_or_raise(inspector or DEFAULT_INSPECTOR)


def build_inspector_command(inspector_bin: str, probe_dir: Path, assemblies: Sequence[Path]) -> List[str]:
    cmd = [inspector_bin, "--probe-dir", str(probe_dir), "--json"]
    cmd.extend(str(a) for a in assemblies)
    return cmd


def run_inspector(
    *,
    inspector_bin: str,
    probe_dir: Path,
    assemblies: Sequence[Path],
    timeout_seconds: int = 0,
) -> CmdResult:
    cmd = build_inspector_command(inspector_bin, probe_dir, assemblies)
    return run_cmd(cmd, timeout_seconds=timeout_seconds)


def parse_inspector_output(res: CmdResult) -> Dict[str, Any]:
    """Validate the inspector result and return its JSON payload."""
    if res.timed_out:
        raise RuntimeError(f"Analyzer inspector timed out after {res.elapsed_seconds:.1f}s")
    if res.exit_code != 0:
        tail = (res.stderr or res.stdout).strip()[-500:]
        raise RuntimeError(f"Analyzer inspector failed (exit {res.exit_code}): {tail}")

    try:
        payload = json.loads(res.stdout)
    except ValueError as e:
        raise RuntimeError(f"Analyzer inspector produced invalid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("analyzers", []), list):
        raise RuntimeError("Analyzer inspector output must be an object with an 'analyzers' list")
    return payload

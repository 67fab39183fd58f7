"""analyzer_plugins.io.workspace

Per-invocation working directories. This layout is part of the
**filesystem contract**:

    <temp root>/<tool name>/
        .nuget/                 shared package cache (reused across runs)
        .output/<token>/        one fresh directory per run
            rules.xml

The cache directory is shared so dependencies downloaded by one
run are reused by the next. The output directory is never shared: its name is
a fresh uuid4 token, so two runs (even for the same package and version, even
concurrently) never write their rules file to the same path.

Directory creation is verified before anything is written underneath; a
failure raises ``RuntimeError`` instead of being assumed away.
"""

from __future__ import annotations

import dataclasses
import sys
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

DEFAULT_TOOL_NAME = "analyzer-plugin-generator"

CACHE_DIRNAME = ".nuget"
OUTPUT_DIRNAME = ".output"
RULES_FILENAME = "rules.xml"


def default_tool_name() -> str:
    """Name of the running tool, used to namespace the temp base directory."""
    entry = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    entry = entry.strip()
    if not entry or entry in {"-c", "-m", "__main__"}:
        return DEFAULT_TOOL_NAME
    return entry


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Could not create directory {path}: {e}") from e
    if not path.is_dir():
        raise RuntimeError(f"Expected a directory at {path}")
    return path


@dataclass(frozen=True)
class WorkRoots:
    """Working directories owned by one pipeline run."""

    base_dir: Path
    cache_dir: Path
    output_dir: Optional[Path] = None

    @property
    def rules_path(self) -> Path:
        if self.output_dir is None:
            raise RuntimeError("Output directory has not been allocated for this run.")
        return self.output_dir / RULES_FILENAME

    def with_output_dir(self) -> "WorkRoots":
        """Allocate a fresh, uniquely-named output directory."""
        output_root = _ensure_dir(self.base_dir / OUTPUT_DIRNAME)

        # uuid4 collisions are not expected; exist_ok=False makes one harmless.
        while True:
            out = output_root / uuid.uuid4().hex
            try:
                out.mkdir(parents=False, exist_ok=False)
            except FileExistsError:
                continue
            except OSError as e:
                raise RuntimeError(f"Could not create output directory {out}: {e}") from e
            break

        if not out.is_dir():
            raise RuntimeError(f"Expected output directory does not exist: {out}")
        return dataclasses.replace(self, output_dir=out)


def prepare_work_roots(
    tool_name: Optional[str] = None,
    *,
    temp_root: Union[str, Path, None] = None,
) -> WorkRoots:
    """Create ``<temp_root>/<tool_name>`` and its shared cache directory."""
    root = Path(temp_root) if temp_root is not None else Path(tempfile.gettempdir())
    name = (tool_name or "").strip() or default_tool_name()

    base_dir = _ensure_dir(root / name)
    cache_dir = _ensure_dir(base_dir / CACHE_DIRNAME)
    return WorkRoots(base_dir=base_dir, cache_dir=cache_dir)

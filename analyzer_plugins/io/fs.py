"""analyzer_plugins.io.fs

Atomic filesystem writers.

Why this module exists
----------------------
The generator emits three kinds of artifacts: the rules file, the plugin
archive and (optionally) a JSON run summary. A process interrupted halfway
through a write must not leave a truncated ``rules.xml`` or ``.jar`` behind
that a later step (or a user) would pick up as valid.

Every writer here goes through a temp file in the destination directory
followed by ``os.replace``.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, IO, Optional


def _atomic_write(
    path: Path,
    write_fn: Callable[[IO[Any]], None],
    *,
    binary: bool = False,
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        if binary:
            f = os.fdopen(fd, "wb")
        else:
            f = os.fdopen(fd, "w", encoding=encoding, newline=newline)
        with f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, p)
    finally:
        # If os.replace fails, best-effort cleanup of the temp file.
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write text atomically (no newline translation)."""

    def _write(f) -> None:
        f.write(text)

    _atomic_write(Path(path), _write, encoding=encoding, newline="")


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write raw bytes atomically."""

    def _write(f) -> None:
        f.write(data)

    _atomic_write(Path(path), _write, binary=True)


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 2,
    sort_keys: bool = True,
    ensure_ascii: bool = False,
    encoding: str = "utf-8",
) -> None:
    """Write JSON atomically with stable formatting."""

    def _write(f) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii, default=str)
        f.write("\n")

    _atomic_write(Path(path), _write, encoding=encoding)


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)

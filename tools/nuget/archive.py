"""tools.nuget.archive

Safe extraction of ``.nupkg`` archives.

A nupkg is a zip (OPC package). Besides the package content it carries
packaging parts that are not part of the package itself; those are skipped.
Entry names are percent-encoded by NuGet (``%2B`` for ``+``) and decoded
here.
"""

from __future__ import annotations

import io
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Union
from urllib.parse import unquote

_SKIPPED_ROOT_FILES = {"[Content_Types].xml"}
_SKIPPED_ROOT_DIRS = {"_rels", "package"}


def _normalized_name(name: str) -> str:
    # Some archives (especially Windows-built ones) use backslashes.
    return unquote(name.replace("\\", "/")).lstrip("/")


def _should_skip_member(name: str) -> bool:
    parts = [p for p in name.split("/") if p]
    if not parts:
        return True
    if len(parts) == 1 and parts[0] in _SKIPPED_ROOT_FILES:
        return True
    if len(parts) > 1 and parts[0] in _SKIPPED_ROOT_DIRS:
        return True
    return False


def _is_within_directory(base_dir: Path, target: Path) -> bool:
    try:
        target.resolve().relative_to(base_dir.resolve())
        return True
    except ValueError:
        return False


def safe_extract_nupkg(source: Union[bytes, Path], dest_dir: Path) -> Path:
    """Extract a nupkg (bytes or path) into dest_dir, refusing path traversal."""
    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    handle = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else Path(source)
    try:
        zf = zipfile.ZipFile(handle, "r")
    except zipfile.BadZipFile as e:
        raise RuntimeError(f"Package archive is not a valid zip: {e}") from e

    with zf:
        members = []
        for m in zf.infolist():
            norm = _normalized_name(m.filename)
            if _should_skip_member(norm):
                continue
            out_path = dest / norm
            if not _is_within_directory(dest, out_path):
                raise RuntimeError(f"Package archive contains an unsafe path: {m.filename}")
            members.append((m, norm, out_path))

        for member, norm, out_path in members:
            if member.is_dir() or norm.endswith("/"):
                out_path.mkdir(parents=True, exist_ok=True)
                continue

            out_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                with zf.open(member, "r") as src, open(out_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (zipfile.BadZipFile, zlib.error, EOFError) as e:
                raise RuntimeError(f"Package archive member {member.filename} is corrupt: {e}") from e

    return dest

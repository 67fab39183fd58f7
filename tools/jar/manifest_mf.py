"""tools.jar.manifest_mf

``META-INF/MANIFEST.MF`` formatting.

Jar manifest rules that matter here:

* one ``Name: value`` attribute per line, CRLF line endings
* no line may exceed 72 bytes (UTF-8); longer lines continue on the next
  line, which starts with a single space
* values cannot contain CR or LF at all; that is why every manifest value is
  sanitized to a single line before it gets here
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

MAX_LINE_BYTES = 72

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,69}$")


def wrap_manifest_line(line: str) -> List[str]:
    """Split one logical line into 72-byte physical lines (never inside a UTF-8 char)."""
    if len(line.encode("utf-8")) <= MAX_LINE_BYTES:
        return [line]

    out: List[str] = []
    buf = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        if size + n > MAX_LINE_BYTES:
            out.append(buf)
            buf = " "
            size = 1
        buf += ch
        size += n
    out.append(buf)
    return out


def format_manifest(attributes: Sequence[Tuple[str, str]]) -> bytes:
    """Render main-section attributes (in order) as MANIFEST.MF bytes."""
    lines: List[str] = []
    for name, value in attributes:
        if not _NAME_RE.match(name):
            raise ValueError(f"Invalid manifest attribute name: {name!r}")
        if "\r" in value or "\n" in value:
            raise ValueError(f"Manifest attribute {name!r} must be a single line")
        lines.extend(wrap_manifest_line(f"{name}: {value}"))

    text = "".join(f"{ln}\r\n" for ln in lines) + "\r\n"
    return text.encode("utf-8")


def parse_manifest(data: bytes) -> List[Tuple[str, str]]:
    """Inverse of :func:`format_manifest` (main section only)."""
    logical: List[str] = []
    for raw in data.decode("utf-8").split("\r\n"):
        if raw == "":
            break
        if raw.startswith(" ") and logical:
            logical[-1] += raw[1:]
        else:
            logical.append(raw)

    out: List[Tuple[str, str]] = []
    for ln in logical:
        name, _, value = ln.partition(": ")
        out.append((name, value))
    return out

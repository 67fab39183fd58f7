"""analyzer_plugins.io

Filesystem contracts and IO helpers.

Design principle
----------------
Where the generator writes things is a public contract: callers look for the
plugin archive by name, and the package cache is reused between runs. This
module centralizes those rules so they evolve in one place.
"""

from __future__ import annotations

from .fs import read_json, write_bytes_atomic, write_json_atomic, write_text_atomic
from .workspace import (
    CACHE_DIRNAME,
    OUTPUT_DIRNAME,
    RULES_FILENAME,
    WorkRoots,
    default_tool_name,
    prepare_work_roots,
)

__all__ = [
    "CACHE_DIRNAME",
    "OUTPUT_DIRNAME",
    "RULES_FILENAME",
    "WorkRoots",
    "default_tool_name",
    "prepare_work_roots",
    "read_json",
    "write_bytes_atomic",
    "write_json_atomic",
    "write_text_atomic",
]

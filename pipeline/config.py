"""pipeline.config

Runtime configuration for the generator.

Values come from (highest precedence first):

1. explicit overrides passed to :func:`load_config` (CLI flags)
2. the process environment
3. ``<repo root>/.env`` (loaded with python-dotenv at call time, never at import)
4. built-in defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from tools.nuget.types import DEFAULT_PACKAGE_SOURCE

ROOT_DIR = Path(__file__).resolve().parents[1]
ENV_PATH: Path = ROOT_DIR / ".env"

DEFAULT_HTTP_TIMEOUT = 60


@dataclass(frozen=True)
class GeneratorConfig:
    package_source: str = DEFAULT_PACKAGE_SOURCE
    http_timeout_seconds: int = DEFAULT_HTTP_TIMEOUT
    inspector: Optional[str] = None
    inspector_timeout_seconds: int = 0
    temp_root: Optional[str] = None


def _int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _str_env(name: str) -> Optional[str]:
    raw = (os.environ.get(name) or "").strip()
    return raw or None


def load_config(*, dotenv_path: Optional[Path] = ENV_PATH, **overrides: Any) -> GeneratorConfig:
    """Build a :class:`GeneratorConfig`; ``None`` overrides are ignored."""
    if dotenv_path is not None:
        load_dotenv(dotenv_path)

    cfg = GeneratorConfig(
        package_source=_str_env("NUGET_PACKAGE_SOURCE") or DEFAULT_PACKAGE_SOURCE,
        http_timeout_seconds=_int_env("NUGET_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        inspector=_str_env("ANALYZER_INSPECTOR"),
        inspector_timeout_seconds=_int_env("ANALYZER_INSPECTOR_TIMEOUT", 0),
        temp_root=_str_env("PLUGIN_GENERATOR_TEMP_ROOT"),
    )

    known = set(GeneratorConfig.__dataclass_fields__)
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown config overrides: {sorted(unknown)}")

    values = {k: v for k, v in overrides.items() if v is not None}
    if not values:
        return cfg
    return replace(cfg, **values)

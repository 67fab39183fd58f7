from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PACKAGE_SOURCE = "https://www.nuget.org/api/v2/"


@dataclass(frozen=True)
class NuGetConfig:
    """Connection settings for NuGet v2 feed calls."""
    source: str = DEFAULT_PACKAGE_SOURCE
    timeout_seconds: int = 60

    @property
    def base_url(self) -> str:
        return self.source.rstrip("/")

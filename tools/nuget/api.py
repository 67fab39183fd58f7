"""tools/nuget/api.py

All NuGet feed HTTP calls live here.

Design goals:
  - Keep network I/O separated from parsing and cache management.
  - A 404 is an answer ("no such package/version"), not an error.
  - Anything else that goes wrong on the wire raises RuntimeError so the
    caller never mistakes a flaky network for a missing package.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional
from urllib.parse import quote

import requests

from analyzer_plugins.domain.version import SemanticVersion

from .types import NuGetConfig

logger = logging.getLogger(__name__)

_ATOM_NS = "{http://www.w3.org/2005/Atom}"
_DATA_NS = "{http://schemas.microsoft.com/ado/2007/08/dataservices}"
_META_NS = "{http://schemas.microsoft.com/ado/2007/08/dataservices/metadata}"

# FindPackagesById() pages are followed via <link rel="next">; stop eventually.
MAX_FEED_PAGES = 50


def package_download_url(cfg: NuGetConfig, package_id: str, version: str) -> str:
    return f"{cfg.base_url}/package/{quote(package_id)}/{quote(version)}"


def download_package(cfg: NuGetConfig, package_id: str, version: str) -> Optional[bytes]:
    """Download the .nupkg for an exact id + version. Returns None on 404."""
    url = package_download_url(cfg, package_id, version)
    logger.debug("Downloading %s", url)

    try:
        resp = requests.get(url, timeout=cfg.timeout_seconds, allow_redirects=True)
    except requests.RequestException as e:
        raise RuntimeError(f"Failed to download {package_id} {version} from {url}: {e}") from e

    if resp.status_code == 404:
        logger.info("Package %s %s not found on %s", package_id, version, cfg.source)
        return None
    if not resp.ok:
        raise RuntimeError(
            f"Package download failed: HTTP {resp.status_code} for {url}: {resp.text[:200]!r}"
        )
    return resp.content


def _entry_version(entry: ET.Element) -> Optional[SemanticVersion]:
    props = entry.find(f"{_META_NS}properties")
    if props is None:
        return None
    raw = props.findtext(f"{_DATA_NS}Version")
    if not raw:
        return None
    try:
        return SemanticVersion.parse(raw)
    except ValueError:
        logger.debug("Ignoring unparseable feed version %r", raw)
        return None


def list_package_versions(cfg: NuGetConfig, package_id: str) -> List[SemanticVersion]:
    """List every published version of a package via FindPackagesById()."""
    url: Optional[str] = f"{cfg.base_url}/FindPackagesById()"
    params: Optional[dict] = {"id": f"'{package_id}'"}
    versions: List[SemanticVersion] = []

    for _ in range(MAX_FEED_PAGES):
        if not url:
            break
        try:
            resp = requests.get(url, params=params, timeout=cfg.timeout_seconds)
        except requests.RequestException as e:
            raise RuntimeError(f"Failed to list versions of {package_id}: {e}") from e

        if resp.status_code == 404:
            return []
        if not resp.ok:
            raise RuntimeError(
                f"Version listing failed: HTTP {resp.status_code} for {package_id}: {resp.text[:200]!r}"
            )

        try:
            feed = ET.fromstring(resp.content)
        except ET.ParseError as e:
            raise RuntimeError(f"Could not parse version feed for {package_id}: {e}") from e

        for entry in feed.findall(f"{_ATOM_NS}entry"):
            v = _entry_version(entry)
            if v is not None:
                versions.append(v)

        url = None
        params = None
        for link in feed.findall(f"{_ATOM_NS}link"):
            if link.get("rel") == "next" and link.get("href"):
                url = link.get("href")
                break

    return sorted(set(versions))

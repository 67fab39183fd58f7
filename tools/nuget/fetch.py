"""tools/nuget/fetch.py

Package acquisition: resolve an id + version against a NuGet v2 feed and
materialize it (and its dependency closure) under a local cache directory.

Cache layout (shared across runs)::

    <cache_dir>/<id>.<normalized version>/
        <id>.<normalized version>.nupkg
        <id>.nuspec
        lib/ analyzers/ ...

A package directory that already holds its ``.nupkg`` and a readable nuspec
is reused without touching the network. New packages are extracted into a
staging directory first and moved into place, so an interrupted download never
leaves a half-populated cache entry behind.

Dependencies resolve to the *lowest* version that satisfies their range.
Dependency problems are logged and skipped: the dependency cache is only an
auxiliary probing path for analyzer discovery.
"""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import List, Optional, Set, Union

from analyzer_plugins.domain.package import MaterializedPackage, PackageDependency
from analyzer_plugins.domain.version import SemanticVersion

from .api import download_package, list_package_versions
from .archive import safe_extract_nupkg
from .nuspec import NuspecMetadata, find_nuspec, read_nuspec
from .types import NuGetConfig

logger = logging.getLogger(__name__)


def package_dir_name(package_id: str, version: SemanticVersion) -> str:
    return f"{package_id}.{version.to_normalized_string()}"


def _to_materialized(meta: NuspecMetadata, directory: Path) -> MaterializedPackage:
    return MaterializedPackage(
        package_id=meta.package_id,
        version=meta.version,
        directory=directory,
        title=meta.title,
        description=meta.description,
        authors=meta.authors,
        owners=meta.owners,
        project_url=meta.project_url,
        license_url=meta.license_url,
        dependencies=meta.dependencies,
    )


def _load_cached(package_dir: Path, nupkg_name: str) -> Optional[NuspecMetadata]:
    if not (package_dir / nupkg_name).is_file():
        return None
    nuspec = find_nuspec(package_dir)
    if nuspec is None:
        return None
    try:
        return read_nuspec(nuspec)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable cached package at %s: %s", package_dir, e)
        return None


def _matches_request(meta: NuspecMetadata, package_id: str, version: SemanticVersion) -> bool:
    return meta.package_id.lower() == package_id.lower() and meta.version == version


def _materialize(
    cfg: NuGetConfig,
    package_id: str,
    version: SemanticVersion,
    cache_dir: Path,
) -> Optional[MaterializedPackage]:
    dir_name = package_dir_name(package_id, version)
    target = cache_dir / dir_name
    nupkg_name = f"{dir_name}.nupkg"

    cached = _load_cached(target, nupkg_name)
    if cached is not None and _matches_request(cached, package_id, version):
        logger.debug("Using cached package %s", target)
        return _to_materialized(cached, target)

    data = download_package(cfg, package_id, version.to_normalized_string())
    if data is None:
        return None

    staging = cache_dir / f".staging-{uuid.uuid4().hex}"
    try:
        safe_extract_nupkg(data, staging)
        (staging / nupkg_name).write_bytes(data)

        nuspec = find_nuspec(staging)
        if nuspec is None:
            raise RuntimeError(f"Package {package_id} {version} does not contain a nuspec")
        try:
            meta = read_nuspec(nuspec)
        except ValueError as e:
            raise RuntimeError(f"Package {package_id} {version} has an invalid nuspec: {e}") from e

        if not _matches_request(meta, package_id, version):
            logger.warning(
                "Feed returned %s %s when %s %s was requested; treating as not found",
                meta.package_id,
                meta.version,
                package_id,
                version,
            )
            return None

        if target.exists():
            # Stale or partial entry (e.g. missing .nupkg); replace it.
            shutil.rmtree(target, ignore_errors=True)
        try:
            os.replace(staging, target)
        except OSError:
            # Another run may have populated the entry in the meantime.
            cached = _load_cached(target, nupkg_name)
            if cached is None:
                raise
            meta = cached
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)

    logger.info("Installed %s %s into %s", meta.package_id, meta.version, target)
    return _to_materialized(meta, target)


def resolve_dependency_version(cfg: NuGetConfig, dep: PackageDependency) -> Optional[SemanticVersion]:
    """Lowest version satisfying the dependency range (None if unresolvable)."""
    rng = dep.version_range
    if rng is not None and rng.min_version is not None and rng.min_inclusive:
        return rng.min_version

    available = list_package_versions(cfg, dep.package_id)
    candidates: List[SemanticVersion] = [v for v in available if rng is None or rng.satisfies(v)]
    if rng is None:
        # No range means "any"; prefer the lowest stable release.
        stable = [v for v in candidates if not v.is_prerelease]
        candidates = stable or candidates
    return min(candidates) if candidates else None


def _fetch_recursive(
    cfg: NuGetConfig,
    package_id: str,
    version: SemanticVersion,
    cache_dir: Path,
    visited: Set[str],
) -> Optional[MaterializedPackage]:
    visited.add(package_id.lower())

    package = _materialize(cfg, package_id, version, cache_dir)
    if package is None:
        return None

    for dep in package.dependencies:
        key = dep.package_id.lower()
        if key in visited:
            continue
        visited.add(key)

        try:
            dep_version = resolve_dependency_version(cfg, dep)
            if dep_version is None:
                logger.warning(
                    "No version of dependency %s satisfies %s; skipping",
                    dep.package_id,
                    dep.version_range,
                )
                continue
            if _fetch_recursive(cfg, dep.package_id, dep_version, cache_dir, visited) is None:
                logger.warning("Dependency %s %s was not found; skipping", dep.package_id, dep_version)
        except RuntimeError as e:
            logger.warning("Could not fetch dependency %s: %s", dep.package_id, e)

    return package


def fetch_package(
    source_url: str,
    package_id: str,
    version: SemanticVersion,
    cache_dir: Union[str, Path],
    *,
    timeout_seconds: int = 60,
) -> Optional[MaterializedPackage]:
    """Fetch a package plus its dependencies into cache_dir.

    Returns the materialized package, or None when the feed has no such
    id + version. Network and HTTP failures raise RuntimeError.
    """
    cfg = NuGetConfig(source=source_url, timeout_seconds=timeout_seconds)
    cache = Path(cache_dir)
    cache.mkdir(parents=True, exist_ok=True)

    logger.info("Fetching %s %s from %s", package_id, version, cfg.source)
    return _fetch_recursive(cfg, package_id, version, cache, visited=set())

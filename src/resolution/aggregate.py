"""Merge the selected releases into global archive and module tables."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

from .models import (
    ArchiveVersions,
    BundleReleases,
    Conflict,
    ConflictKind,
    ModuleRecord,
    ResolutionError,
    ResolverSettings,
)
from .scanner import metadata_path, read_metadata

logger = logging.getLogger(__name__)


def best_archive_versions(
    best_releases: Dict[str, str],
    bundle_releases: BundleReleases,
) -> Tuple[ArchiveVersions, Optional[Conflict]]:
    """Union the archive versions of every selected release.

    Bundles sharing an archive must agree on its version string exactly.

    Returns:
        Tuple of (archives, conflict)
    """
    archives: ArchiveVersions = {}
    owners: Dict[str, str] = {}
    for bundle_name, release in best_releases.items():
        for archive_name, version in bundle_releases[bundle_name][release].items():
            existing = archives.get(archive_name)
            if existing is None:
                archives[archive_name] = version
                owners[archive_name] = bundle_name
            elif existing != version:
                return {}, Conflict(
                    kind=ConflictKind.VERSION_CONFLICT,
                    message=f"Version conflict: {archive_name} {existing} & {version}",
                    names=(archive_name, owners[archive_name], bundle_name),
                )
    return archives, None


async def best_image_modules(
    bundle_directory: str,
    best_releases: Dict[str, str],
    *,
    settings: Optional[ResolverSettings] = None,
) -> Tuple[Dict[str, ModuleRecord], Optional[Conflict]]:
    """Collect the module records of every selected release.

    Only the winning releases are re-read. A module name may be declared by
    one bundle only.

    Returns:
        Tuple of (modules, conflict)
    """
    settings = settings or ResolverSettings.from_constants()
    semaphore = asyncio.Semaphore(settings.read_max_concurrency)
    modules: Dict[str, ModuleRecord] = {}

    async def _collect(bundle_name: str, release: str) -> None:
        path = metadata_path(bundle_directory, bundle_name, release, settings)
        meta_modules = await read_metadata(path, semaphore)
        for module_name, meta in meta_modules.items():
            if not module_name:
                continue
            if module_name in modules:
                other = modules[module_name].bundle
                raise ResolutionError(Conflict(
                    kind=ConflictKind.MODULE_CONFLICT,
                    message=f"Module conflict: {module_name} in {bundle_name} & {other}",
                    names=(module_name, bundle_name, other),
                ))
            modules[module_name] = ModuleRecord.from_meta(bundle_name, meta)

    try:
        await asyncio.gather(*(
            _collect(bundle_name, release) for bundle_name, release in best_releases.items()
        ))
    except ResolutionError as exc:
        return {}, exc.conflict
    logger.debug("Collected %d modules from %d bundles", len(modules), len(best_releases))
    return modules, None

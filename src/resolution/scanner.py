"""Release scanner: discover release metadata and extract archive versions.

Layout on disk is ``<root>/<bundle>/<release>/0/<bundle-file>.json``; every
document nests its modules under ``"_"`` and each module record names the
archive (name and version) it ships in.
"""

from __future__ import annotations

import asyncio
import glob
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from common.file_io import FileLocation, iter_files, read_file_text
from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .models import (
    ArchiveVersions,
    BundleReleases,
    Conflict,
    ConflictKind,
    ResolutionError,
    ResolverSettings,
)

logger = logging.getLogger(__name__)


def _metadata_error(path: str, reason: str) -> ResolutionError:
    return ResolutionError(Conflict(
        kind=ConflictKind.METADATA,
        message=f"Invalid bundle metadata: {path}: {reason}",
        names=(path,),
    ))


def metadata_patterns(bundle_directory: str, bundle_names: List[str], settings: ResolverSettings) -> List[str]:
    """Glob patterns matching every release metadata document of the bundles."""
    root = glob.escape(bundle_directory)
    return [
        os.path.join(root, glob.escape(name), "*", settings.anonymous_home, settings.metadata_name)
        for name in bundle_names
    ]


def metadata_path(bundle_directory: str, bundle_name: str, release: str, settings: ResolverSettings) -> str:
    """Path of the metadata document of one release."""
    return os.path.join(bundle_directory, bundle_name, release, settings.anonymous_home, settings.metadata_name)


def release_coordinates(path: str) -> Tuple[str, str]:
    """Return (bundle name, release identity) for a metadata document path."""
    anonymous_home = os.path.dirname(path)
    release_home = os.path.dirname(anonymous_home)
    release = os.path.basename(release_home)
    bundle_name = os.path.basename(os.path.dirname(release_home))
    return bundle_name, release


def parse_metadata(source: str, path: str) -> Dict[str, Dict[str, Any]]:
    """Parse a metadata document and return its module map.

    Raises:
        ResolutionError: With a METADATA conflict if the document is not a JSON
            object holding a module mapping under ``"_"``.
    """
    try:
        document = json.loads(source)
    except json.JSONDecodeError as exc:
        raise _metadata_error(path, f"not valid JSON ({exc})") from exc
    if not isinstance(document, dict):
        raise _metadata_error(path, "top level is not an object")
    modules = document.get(Constants.METADATA_ROOT_KEY)
    if not isinstance(modules, dict):
        raise _metadata_error(path, f"missing '{Constants.METADATA_ROOT_KEY}' module map")
    for module_name, meta in modules.items():
        if not isinstance(meta, dict):
            raise _metadata_error(path, f"module {module_name!r} is not an object")
    return modules


def extract_archive_versions(modules: Dict[str, Dict[str, Any]], path: str) -> ArchiveVersions:
    """Collect the archive name -> version pairs declared by a module map."""
    archive_versions: ArchiveVersions = {}
    for module_name, meta in modules.items():
        archive = meta.get("archive")
        if not isinstance(archive, dict) or not archive.get("name") or not archive.get("version"):
            raise _metadata_error(path, f"module {module_name!r} has no archive name/version")
        name, version = archive["name"], archive["version"]
        if not isinstance(name, str) or not isinstance(version, str):
            raise _metadata_error(path, f"module {module_name!r} archive name/version must be strings")
        archive_versions[name] = version
    return archive_versions


async def read_metadata(location, semaphore: Optional[asyncio.Semaphore] = None) -> Dict[str, Dict[str, Any]]:
    """Read and parse one metadata document.

    Raises:
        ResolutionError: With a METADATA conflict on I/O or parse failure.
    """
    path = location.path if isinstance(location, FileLocation) else location
    try:
        if semaphore is None:
            source = await read_file_text(location)
        else:
            async with semaphore:
                source = await read_file_text(location)
    except (OSError, UnicodeDecodeError) as exc:
        raise _metadata_error(path, f"unreadable ({exc})") from exc
    return parse_metadata(source, path)


async def scan_bundle_releases(
    bundle_directory: str,
    bundle_names: List[str],
    *,
    settings: Optional[ResolverSettings] = None,
) -> Tuple[BundleReleases, Optional[Conflict]]:
    """Map every bundle to its releases and their archive versions.

    Bundles without any release are simply absent from the mapping.

    Returns:
        Tuple of (bundle_releases, conflict)
    """
    settings = settings or ResolverSettings.from_constants()
    semaphore = asyncio.Semaphore(settings.read_max_concurrency)
    bundle_releases: BundleReleases = {}

    async def _scan_one(location: FileLocation) -> None:
        modules = await read_metadata(location, semaphore)
        bundle_name, release = release_coordinates(location.path)
        releases = bundle_releases.setdefault(bundle_name, {})
        releases[release] = extract_archive_versions(modules, location.path)

    patterns = metadata_patterns(bundle_directory, bundle_names, settings)
    with Timer() as t:
        try:
            await asyncio.gather(*(_scan_one(location) for location in iter_files(patterns)))
        except ResolutionError as exc:
            logger.debug("Scan aborted: %s", exc)
            return {}, exc.conflict
        except OSError as exc:
            return {}, _metadata_error(bundle_directory, f"cannot enumerate releases ({exc})").conflict

    if is_debug_enabled(logger):
        logger.debug(
            "Scanned bundle releases",
            extra=extra_context(
                event="scan",
                component="scanner",
                action="scan_bundle_releases",
                target=bundle_directory,
                count=sum(len(r) for r in bundle_releases.values()),
                duration_ms=t.duration_ms(),
            ),
        )
    return bundle_releases, None

"""Resolution service orchestrating scan, selection and merging."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled

from .aggregate import best_archive_versions, best_image_modules
from .models import (
    Conflict,
    ConflictKind,
    MergedResult,
    ResolutionOutcome,
    ResolverSettings,
)
from .scanner import scan_bundle_releases
from .selector import best_bundle_releases

logger = logging.getLogger(__name__)


async def resolve_bundles(
    bundle_directory: str,
    bundle_names: List[str],
    *,
    settings: Optional[ResolverSettings] = None,
) -> ResolutionOutcome:
    """Resolve one release per bundle and merge their metadata.

    Stops at the first conflict; no partial result is returned.

    Args:
        bundle_directory: Directory holding one sub-directory per bundle
        bundle_names: Bundles to resolve
        settings: Tunables; defaults to the current Constants

    Returns:
        ResolutionOutcome with either result or conflict set
    """
    settings = settings or ResolverSettings.from_constants()
    with Timer() as t:
        bundle_releases, conflict = await scan_bundle_releases(
            bundle_directory, bundle_names, settings=settings
        )
        if conflict is not None:
            return ResolutionOutcome(conflict=conflict)

        missing = [name for name in bundle_names if not bundle_releases.get(name)]
        if missing:
            return ResolutionOutcome(conflict=Conflict(
                kind=ConflictKind.UNKNOWN_BUNDLE,
                message=f"Unknown bundle(s): {','.join(missing)}",
                names=tuple(missing),
            ))

        best_releases, conflict = best_bundle_releases(bundle_releases)
        if conflict is not None:
            return ResolutionOutcome(conflict=conflict)
        # Report bundles in the order they were requested
        best_releases = {name: best_releases[name] for name in dict.fromkeys(bundle_names)}

        archives, conflict = best_archive_versions(best_releases, bundle_releases)
        if conflict is not None:
            return ResolutionOutcome(conflict=conflict)

        modules, conflict = await best_image_modules(
            bundle_directory, best_releases, settings=settings
        )
        if conflict is not None:
            return ResolutionOutcome(conflict=conflict)

    if is_debug_enabled(logger):
        logger.debug(
            "Resolution finished",
            extra=extra_context(
                event="function_exit",
                component="service",
                action="resolve_bundles",
                outcome="success",
                count=len(best_releases),
                duration_ms=t.duration_ms(),
            ),
        )
    return ResolutionOutcome(result=MergedResult(
        best_releases=best_releases,
        archives=archives,
        modules=modules,
        settings=settings,
    ))


def resolve_bundles_sync(
    bundle_directory: str,
    bundle_names: List[str],
    *,
    settings: Optional[ResolverSettings] = None,
) -> ResolutionOutcome:
    """Blocking wrapper around resolve_bundles."""
    return asyncio.run(resolve_bundles(bundle_directory, bundle_names, settings=settings))

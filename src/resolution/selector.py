"""Release selector: pick the dominating release of every bundle."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from versioning.compare import compare_versions

from .models import ArchiveVersions, BundleReleases, Conflict, ConflictKind, Direction

logger = logging.getLogger(__name__)

Comparator = Callable[[str, str], int]


def compare_releases(
    challenger: ArchiveVersions,
    best: ArchiveVersions,
    comparator: Comparator = compare_versions,
) -> Tuple[Direction, Optional[Conflict]]:
    """Compare a challenger release against the current best one.

    Only archives of the challenger that best also declares are examined;
    archives declared by best alone are never looked at. Versions must move
    in one direction across all examined archives.

    Returns:
        Tuple of (direction, conflict)
    """
    direction = Direction.UNDETERMINED
    for archive_name, new_version in challenger.items():
        old_version = best.get(archive_name)
        if not new_version or not old_version:
            continue
        try:
            comparison = comparator(new_version, old_version)
        except ValueError as exc:
            return Direction.UNDETERMINED, Conflict(
                kind=ConflictKind.METADATA,
                message=f"Invalid version: {archive_name} {exc}",
                names=(archive_name,),
            )
        if comparison > 0 and direction != Direction.BEHIND:
            direction = Direction.AHEAD
        elif comparison < 0 and direction != Direction.AHEAD:
            direction = Direction.BEHIND
        elif comparison != 0:
            return Direction.UNDETERMINED, Conflict(
                kind=ConflictKind.INCONSISTENT_VERSIONS,
                message=f"Inconsistent versions: {archive_name} {new_version} & {old_version}",
                names=(archive_name, new_version, old_version),
            )
    return direction, None


def is_better_release(
    challenger: ArchiveVersions,
    best: ArchiveVersions,
    comparator: Comparator = compare_versions,
) -> Tuple[bool, Optional[Conflict]]:
    """True when the challenger is strictly ahead of best."""
    direction, conflict = compare_releases(challenger, best, comparator)
    return direction == Direction.AHEAD, conflict


def best_bundle_releases(
    bundle_releases: BundleReleases,
    comparator: Comparator = compare_versions,
) -> Tuple[Dict[str, str], Optional[Conflict]]:
    """Select one release identity per bundle.

    Releases are visited in sorted identity order, so among releases with
    equal archive versions the first identity wins.

    Returns:
        Tuple of (best_releases, conflict)
    """
    best_releases: Dict[str, str] = {}
    for bundle_name, releases in bundle_releases.items():
        best_release: Optional[str] = None
        for release in sorted(releases):
            if best_release is None:
                best_release = release
                continue
            better, conflict = is_better_release(releases[release], releases[best_release], comparator)
            if conflict is not None:
                logger.debug("Bundle %s: %s", bundle_name, conflict)
                return {}, conflict
            if better:
                best_release = release
        if best_release is not None:
            best_releases[bundle_name] = best_release
            if is_debug_enabled(logger):
                logger.debug(
                    "Selected release",
                    extra=extra_context(
                        event="decision",
                        component="selector",
                        action="best_bundle_releases",
                        target=bundle_name,
                        outcome=best_release,
                        count=len(releases),
                    ),
                )
    return best_releases, None

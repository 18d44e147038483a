"""Release resolution package.

Selects one canonical release per bundle and merges the selected releases'
metadata into global archive and module tables.
"""

from .models import (
    Conflict,
    ConflictKind,
    Direction,
    MergedResult,
    ModuleRecord,
    ResolutionError,
    ResolutionOutcome,
    ResolverSettings,
)
from .service import resolve_bundles, resolve_bundles_sync

__all__ = [
    "Conflict",
    "ConflictKind",
    "Direction",
    "MergedResult",
    "ModuleRecord",
    "ResolutionError",
    "ResolutionOutcome",
    "ResolverSettings",
    "resolve_bundles",
    "resolve_bundles_sync",
]

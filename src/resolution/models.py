"""Data models for release resolution and metadata merging."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants


class ConflictKind(Enum):
    """Kinds of fatal resolution failures."""
    UNKNOWN_BUNDLE = "unknown_bundle"
    INCONSISTENT_VERSIONS = "inconsistent_versions"
    VERSION_CONFLICT = "version_conflict"
    MODULE_CONFLICT = "module_conflict"
    METADATA = "metadata"


class Direction(Enum):
    """Running outcome of comparing a challenger release against the best one."""
    UNDETERMINED = 0
    AHEAD = 1
    BEHIND = -1


@dataclass(frozen=True)
class Conflict:
    """A fatal resolution failure, returned as a value by each stage."""
    kind: ConflictKind
    message: str
    names: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.message


class ResolutionError(Exception):
    """Raised when an unsuccessful outcome is unwrapped."""

    def __init__(self, conflict: Conflict):
        super().__init__(conflict.message)
        self.conflict = conflict

    @property
    def kind(self) -> ConflictKind:
        """Kind of the underlying conflict."""
        return self.conflict.kind


# archive name -> version
ArchiveVersions = Dict[str, str]
# bundle name -> release identity -> archive versions
BundleReleases = Dict[str, Dict[str, ArchiveVersions]]


@dataclass
class ModuleRecord:
    """A module published by the selected release of a bundle."""
    bundle: str
    ordinal: Any = None
    optional: Any = None
    depends: Optional[List[str]] = None

    @classmethod
    def from_meta(cls, bundle: str, meta: Dict[str, Any]) -> "ModuleRecord":
        """Build a record from a metadata entry, keeping only published fields."""
        return cls(
            bundle=bundle,
            ordinal=meta.get("ordinal"),
            optional=meta.get("optional"),
            depends=meta.get("depends"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Published fields; fields the metadata left out are omitted."""
        published = {
            "bundle": self.bundle,
            "ordinal": self.ordinal,
            "optional": self.optional,
            "depends": self.depends,
        }
        return {key: value for key, value in published.items() if value is not None}


def meta_modules(modules: Dict[str, ModuleRecord]) -> Dict[str, Dict[str, Any]]:
    """Project module records onto their published fields."""
    return {name: record.to_dict() for name, record in modules.items()}


@dataclass(frozen=True)
class ResolverSettings:
    """Snapshot of the tunables one resolution run works with."""
    bundle_file: str = Constants.BUNDLE_FILE
    archive_file: str = Constants.ARCHIVE_FILE
    anonymous_home: str = Constants.ANONYMOUS_HOME
    preserve: Any = Constants.LIBRARY_PRESERVE
    publish: Any = Constants.LIBRARY_PUBLISH
    read_max_concurrency: int = Constants.READ_MAX_CONCURRENCY

    @classmethod
    def from_constants(cls) -> "ResolverSettings":
        """Capture the current (possibly config-overridden) Constants."""
        return cls(
            bundle_file=Constants.BUNDLE_FILE,
            archive_file=Constants.ARCHIVE_FILE,
            anonymous_home=Constants.ANONYMOUS_HOME,
            preserve=Constants.LIBRARY_PRESERVE,
            publish=Constants.LIBRARY_PUBLISH,
            read_max_concurrency=max(1, int(Constants.READ_MAX_CONCURRENCY)),
        )

    @property
    def metadata_name(self) -> str:
        return f"{self.bundle_file}{Constants.METADATA_EXTENSION}"


@dataclass
class MergedResult:
    """The single consistent view built from the selected releases."""
    best_releases: Dict[str, str]
    archives: ArchiveVersions
    modules: Dict[str, ModuleRecord]
    settings: ResolverSettings = field(default_factory=ResolverSettings)

    def constants(self) -> Dict[str, Any]:
        return {
            "basename": {
                "archive": self.settings.archive_file,
                "bundle": self.settings.bundle_file,
            },
            "preserve": self.settings.preserve,
            "publish": self.settings.publish,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Render the result in its published JSON shape."""
        return {
            "constants": self.constants(),
            "archives": {Constants.METADATA_ROOT_KEY: dict(self.archives)},
            "bundles": {Constants.METADATA_ROOT_KEY: dict(self.best_releases)},
            "modules": {Constants.METADATA_ROOT_KEY: meta_modules(self.modules)},
        }


@dataclass
class ResolutionOutcome:
    """Either a merged result or the conflict that stopped resolution."""
    result: Optional[MergedResult] = None
    conflict: Optional[Conflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def unwrap(self) -> MergedResult:
        """Return the result or raise ResolutionError carrying the conflict."""
        if self.conflict is not None:
            raise ResolutionError(self.conflict)
        return self.result

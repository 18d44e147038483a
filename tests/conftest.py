"""Shared fixtures for laying out bundle release trees on disk."""

import json

import pytest

from constants import Constants

_TUNABLES = (
    "BUNDLE_FILE",
    "ARCHIVE_FILE",
    "LIBRARY_PRESERVE",
    "LIBRARY_PUBLISH",
    "READ_MAX_CONCURRENCY",
    "BUNDLE_DIRECTORY",
)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants overrides applied by config loading or the CLI."""
    saved = {name: getattr(Constants, name) for name in _TUNABLES}
    yield
    for name, value in saved.items():
        setattr(Constants, name, value)


def module_meta(archive, version, ordinal=0, optional=False, depends=None, **extra):
    """Build one module record of a metadata document."""
    meta = {
        "archive": {"name": archive, "version": version},
        "ordinal": ordinal,
        "optional": optional,
        "depends": depends or [],
    }
    meta.update(extra)
    return meta


@pytest.fixture
def bundle_root(tmp_path):
    """Return (root, write_release) for building <root>/<bundle>/<release>/0/bundle.json."""
    root = tmp_path / "bundles"
    root.mkdir()

    def write_release(bundle, release, modules=None, archives=None, raw=None):
        """Write a release; ``archives`` is a shortcut creating one module per archive."""
        home = root / bundle / release / "0"
        home.mkdir(parents=True, exist_ok=True)
        target = home / "bundle.json"
        if raw is not None:
            target.write_text(raw, encoding="utf-8")
            return target
        modules = dict(modules or {})
        for archive, version in (archives or {}).items():
            modules[f"{bundle}.{archive}"] = module_meta(archive, version)
        target.write_text(json.dumps({"_": modules}, indent=2), encoding="utf-8")
        return target

    return root, write_release


@pytest.fixture
def make_meta():
    """Expose module_meta to tests."""
    return module_meta

"""Constants used in the project."""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Metadata document basenames (without extension)
    BUNDLE_FILE = "bundle"
    ARCHIVE_FILE = "archive"
    METADATA_EXTENSION = ".json"
    # Every release keeps its metadata below an anonymous "0" directory
    ANONYMOUS_HOME = "0"
    # Metadata documents nest their module map under this key
    METADATA_ROOT_KEY = "_"

    # Library policy values passed through to the merged result
    LIBRARY_PRESERVE = 3
    LIBRARY_PUBLISH = False

    READ_MAX_CONCURRENCY = 16
    BUNDLE_DIRECTORY = None

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "RELEASEMERGE_LOG_LEVEL"
    ENV_CONFIG = "RELEASEMERGE_CONFIG"


# Maps dotted YAML keys onto Constants attributes and their coercions
_CONFIG_KEYS = {
    "basename.archive": ("ARCHIVE_FILE", str),
    "basename.bundle": ("BUNDLE_FILE", str),
    "library.preserve": ("LIBRARY_PRESERVE", None),
    "library.publish": ("LIBRARY_PUBLISH", None),
    "resolution.read_max_concurrency": ("READ_MAX_CONCURRENCY", int),
    "resolution.bundle_directory": ("BUNDLE_DIRECTORY", str),
}


def _flatten(data, prefix=""):
    flat = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted + "."))
        else:
            flat[dotted] = value
    return flat


def _load_yaml_config(path=None):
    """Load a YAML configuration file and apply it onto Constants.

    Args:
        path (str, optional): Config path. Falls back to RELEASEMERGE_CONFIG.

    Returns:
        dict: Flattened keys that were applied.
    """
    path = path or os.environ.get(Constants.ENV_CONFIG)
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    import yaml  # pylint: disable=import-outside-toplevel

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to load config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", path)
        return {}

    applied = {}
    for dotted, value in _flatten(data).items():
        target = _CONFIG_KEYS.get(dotted)
        if target is None or value is None:
            continue
        attr, coerce = target
        try:
            setattr(Constants, attr, coerce(value) if coerce else value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid config value %s=%r", dotted, value)
            continue
        applied[dotted] = value
    return applied

"""CLI configuration: YAML config loading, CLI overrides and logging setup.

CLI flags take precedence over the YAML file, which takes precedence over
the defaults in Constants.
"""

from __future__ import annotations

import logging
import os

from common.logging_utils import configure_logging
from constants import Constants, _load_yaml_config

logger = logging.getLogger(__name__)


def setup_logging(args) -> None:
    """Configure logging from --loglevel and --logfile."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def apply_config(args) -> None:
    """Load the YAML config (if any) and apply CLI overrides onto Constants."""
    applied = _load_yaml_config(getattr(args, "CONFIG", None))
    if applied:
        logger.info("Loaded config keys: %s", ", ".join(sorted(applied)))

    if getattr(args, "BUNDLE_DIRECTORY", None):
        Constants.BUNDLE_DIRECTORY = args.BUNDLE_DIRECTORY
    if getattr(args, "READ_MAX_CONCURRENCY", None) is not None:
        Constants.READ_MAX_CONCURRENCY = max(1, int(args.READ_MAX_CONCURRENCY))

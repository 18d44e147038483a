"""releasemerge - select one release per bundle and merge their metadata.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from args import parse_args
from cli_config import apply_config, setup_logging
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from resolution import ResolverSettings, resolve_bundles_sync


def export_json(merged, path):
    """Writes the merged result as JSON.

    Args:
        merged (dict): Merged result in its published shape.
        path (str): File path, or None for stdout.
    """
    body = json.dumps(merged, indent=2)
    if path is None:
        sys.stdout.write(body + "\n")
        return
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(body + "\n")
        logging.info("JSON file saved to %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def run(args):
    """Resolve the requested bundles and export the result.

    Returns:
        int: Exit code
    """
    logger = logging.getLogger(__name__)

    bundle_directory = Constants.BUNDLE_DIRECTORY
    if not bundle_directory:
        logging.error("No bundle directory given (use --directory or resolution.bundle_directory).")
        return ExitCodes.FILE_ERROR.value
    if not os.path.isdir(bundle_directory):
        logging.error("Bundle directory not found: %s", bundle_directory)
        return ExitCodes.FILE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "Resolving bundles",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="run",
                target=bundle_directory,
                count=len(args.bundles),
            ),
        )

    outcome = resolve_bundles_sync(
        bundle_directory, args.bundles, settings=ResolverSettings.from_constants()
    )
    if not outcome.ok:
        logging.error("%s", outcome.conflict.message)
        return ExitCodes.RESOLUTION_ERROR.value

    result = outcome.result
    for bundle_name, release in result.best_releases.items():
        logging.info("Selected %s release %s", bundle_name, release)

    if args.OUTPUT or not args.QUIET:
        export_json(result.to_dict(), args.OUTPUT)
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)
    apply_config(args)
    sys.exit(run(args))


if __name__ == "__main__":
    main()

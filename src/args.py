"""Argument parsing functionality for releasemerge."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="releasemerge",
        description=(
            "releasemerge - select one release per bundle and merge their metadata"
        ),
        add_help=True,
    )

    parser.add_argument("bundles",
                        metavar="BUNDLE",
                        help="Bundle names to resolve",
                        nargs="+")
    parser.add_argument("-d", "--directory",
                        dest="BUNDLE_DIRECTORY",
                        help="Directory holding one sub-directory per bundle",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output JSON file (default: stdout)",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to YAML configuration file",
                        action="store",
                        type=str)
    parser.add_argument("--read-concurrency",
                        dest="READ_MAX_CONCURRENCY",
                        help="Maximum number of metadata documents read at once",
                        action="store",
                        type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not write the merged result to stdout.",
                        action="store_true")

    return parser.parse_args(argv)

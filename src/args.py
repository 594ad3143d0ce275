"""Argument parsing functionality for packlink."""

import argparse

from constants import Constants, Verbs

USAGE = """Usage:
  packlink publish [--watch[=<dir>]]      # Create and cache a tarball of the current package
  packlink add <package-name> [--watch]   # Install the newest cached tarball of a package
"""


def _add_common_options(parser):
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help="Override the tarball cache directory",
                        action="store",
                        type=str)


def build_parser():
    """Build the packlink argument parser."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROG,
        description="packlink - local tarball cache for iterating across dependent projects",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action")

    publish = subparsers.add_parser(
        Verbs.PUBLISH.value,
        help="Pack the current package and store the tarball in the cache",
    )
    publish.add_argument("--watch",
                         dest="WATCH",
                         help="Republish whenever DIR changes (default: the configured build output directory)",
                         nargs="?",
                         const=True,
                         default=None,
                         metavar="DIR")
    _add_common_options(publish)

    add = subparsers.add_parser(
        Verbs.ADD.value,
        help="Install the newest cached tarball of a package",
    )
    add.add_argument("PACKAGE",
                     help="Package name, e.g. my-lib or @scope/my-lib",
                     nargs="?",
                     default=None)
    add.add_argument("--watch",
                     dest="WATCH",
                     help="Re-add whenever a new tarball of the package is published",
                     action="store_true")
    _add_common_options(add)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

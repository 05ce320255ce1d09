"""Argument parsing for the modcheck CLI."""

import argparse

from constants import Constants


def _add_common_options(parser):
    """Options shared by every subcommand."""
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help=f"Path to a YAML config file (default: ./{Constants.CONFIG_FILE} if present)",
                        action="store",
                        type=str)
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
    parser.add_argument("--replace-version",
                        dest="REPLACE_VERSION",
                        help="Comma separated id:version replacements, e.g. fabric-api:0.90.0",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if warnings are present.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``.

    Returns:
        argparse.Namespace: Parsed arguments with the subcommand in ``COMMAND``.
    """
    parser = argparse.ArgumentParser(
        prog="modcheck",
        description="modcheck - test versions against mod dependency ranges",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    test_parser = subparsers.add_parser(
        "test",
        help="Test a version against one or more ranges (ranges are OR-ed)",
    )
    test_parser.add_argument("VERSION",
                             help="Version to test, e.g. 1.20.1")
    test_parser.add_argument("RANGES",
                             nargs="+",
                             help="Range expressions, e.g. '>=1.0 <2' '1.4.x'")
    _add_common_options(test_parser)

    interval_parser = subparsers.add_parser(
        "interval",
        help="Print the version intervals covered by the ranges",
    )
    interval_parser.add_argument("RANGES",
                                 nargs="+",
                                 help="Range expressions; their intervals are unioned")
    interval_parser.add_argument("--invert",
                                 dest="INVERT",
                                 help="Print the complement instead",
                                 action="store_true")
    _add_common_options(interval_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare two versions and print <, = or >",
    )
    compare_parser.add_argument("VERSION_A")
    compare_parser.add_argument("VERSION_B")
    _add_common_options(compare_parser)

    check_parser = subparsers.add_parser(
        "check",
        help="Check the dependency declarations of a YAML mod manifest",
    )
    check_parser.add_argument("MANIFEST",
                              help="Path to the manifest file")
    check_parser.add_argument("--json",
                              dest="JSON",
                              help="Print findings as JSON",
                              action="store_true")
    _add_common_options(check_parser)

    return parser.parse_args(argv)

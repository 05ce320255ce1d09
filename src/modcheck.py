"""modcheck: command line front end for the modversion library."""

import json
import logging
import sys
from typing import List

from args import parse_args
from cli_config import CliSettings, resolve_settings
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from manifest import ManifestError, check_mods, load_manifest
from modversion import (
    PredicateCache,
    VersionInterval,
    VersionParsingError,
    complement_all,
    parse_version,
    union,
)

logger = logging.getLogger(__name__)


def _setup_logging(args, settings: CliSettings) -> None:
    """Configure console logging and the optional log file."""
    configure_logging(settings.log_level)

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _emit(args, text: str) -> None:
    if not getattr(args, "QUIET", False):
        print(text)


def _ranges_to_intervals(cache: PredicateCache, ranges: List[str]) -> List[VersionInterval]:
    intervals: List[VersionInterval] = []
    for expression in ranges:
        intervals = union(intervals, cache.get_or_parse(expression).interval)
    return intervals


def run_test(args, cache: PredicateCache) -> ExitCodes:
    """Test VERSION against RANGES; any matching range satisfies."""
    version = parse_version(args.VERSION)
    predicates = [cache.get_or_parse(expression) for expression in args.RANGES]

    for predicate in predicates:
        if predicate.test(version):
            _emit(args, f"{version} satisfies {predicate}")
            return ExitCodes.SUCCESS

    _emit(args, f"{version} does not satisfy {' || '.join(str(p) for p in predicates)}")
    return ExitCodes.UNSATISFIED


def run_interval(args, cache: PredicateCache) -> ExitCodes:
    """Print the intervals covered by RANGES, or their complement with --invert."""
    intervals = _ranges_to_intervals(cache, args.RANGES)
    if getattr(args, "INVERT", False):
        intervals = complement_all(intervals)

    if not intervals:
        _emit(args, "(empty)")
    for interval in intervals:
        _emit(args, str(interval))
    return ExitCodes.SUCCESS


def run_compare(args) -> ExitCodes:
    """Print how VERSION_A orders against VERSION_B."""
    a = parse_version(args.VERSION_A)
    b = parse_version(args.VERSION_B)
    result = a.compare_to(b)
    symbol = "<" if result < 0 else ">" if result > 0 else "="
    _emit(args, f"{a} {symbol} {b}")
    return ExitCodes.SUCCESS


def run_check(args, settings: CliSettings) -> ExitCodes:
    """Check a mod manifest and report unmet dependency declarations."""
    mods = load_manifest(args.MANIFEST)
    findings = check_mods(mods, settings.overrides)

    errors = [f for f in findings if f.severity == "error"]
    warnings = [f for f in findings if f.severity == "warning"]

    if getattr(args, "JSON", False):
        _emit(args, json.dumps({
            "mods": len(mods),
            "errors": len(errors),
            "warnings": len(warnings),
            "findings": [f.to_dict() for f in findings],
        }, ensure_ascii=False, indent=4))
    else:
        for finding in findings:
            _emit(args, f"[{finding.severity.upper()}] {finding.message}")
        _emit(args, f"{len(mods)} mods checked, {len(errors)} errors, {len(warnings)} warnings")

    if errors:
        return ExitCodes.UNSATISFIED
    if warnings and getattr(args, "ERROR_ON_WARNINGS", False):
        logger.warning("Warnings present, exiting with non-zero status code.")
        return ExitCodes.EXIT_WARNINGS
    return ExitCodes.SUCCESS


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ValueError as e:
        configure_logging()
        logger.error("Invalid version replacement: %s", e)
        return ExitCodes.PARSE_ERROR.value

    _setup_logging(args, settings)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )

    cache = PredicateCache(default_ttl=settings.cache_ttl, max_entries=settings.cache_max_entries)

    try:
        if args.COMMAND == "test":
            code = run_test(args, cache)
        elif args.COMMAND == "interval":
            code = run_interval(args, cache)
        elif args.COMMAND == "compare":
            code = run_compare(args)
        else:
            code = run_check(args, settings)
    except VersionParsingError as e:
        logger.error("Invalid version or range: %s", e)
        return ExitCodes.PARSE_ERROR.value
    except ManifestError as e:
        logger.error("%s, aborting", e)
        return ExitCodes.FILE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action=args.COMMAND, outcome=code.name),
        )
    return code.value


if __name__ == "__main__":
    sys.exit(main())

"""Runtime settings for the modcheck CLI.

Settings are resolved with the following precedence, highest first:

1. CLI arguments
2. Environment variables (MODVERSION_LOG_LEVEL, MODVERSION_REPLACE_VERSION)
3. YAML config file (``--config``, MODVERSION_CONFIG or ./modversion.yml)
4. Built-in defaults from ``constants.Constants``
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from modversion import VersionOverrides

logger = logging.getLogger(__name__)


@dataclass
class CliSettings:
    """Effective settings after all sources have been applied."""

    log_level: str = Constants.DEFAULT_LOG_LEVEL
    cache_ttl: int = Constants.PREDICATE_CACHE_TTL_SEC
    cache_max_entries: int = Constants.PREDICATE_CACHE_MAX_ENTRIES
    overrides: VersionOverrides = field(default_factory=VersionOverrides)
    config_path: Optional[str] = None


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file.

    A missing or malformed file is logged and treated as empty so the CLI
    keeps working with defaults.

    Args:
        path: Path to the YAML file, or None.

    Returns:
        Top-level mapping from the file, empty when unavailable.
    """
    if not path:
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file not found: %s", path)
        return {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping", path)
        return {}
    return data


def _find_config_path(args, environ: Mapping[str, str]) -> Optional[str]:
    explicit = getattr(args, "CONFIG", None) or environ.get(Constants.ENV_CONFIG)
    if explicit:
        return explicit
    if os.path.isfile(Constants.CONFIG_FILE):
        return Constants.CONFIG_FILE
    return None


def _as_int(value: Any, default: int, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r, using %d", name, value, default)
        return default


def resolve_settings(args, environ: Optional[Mapping[str, str]] = None) -> CliSettings:
    """Combine CLI arguments, environment and config file into CliSettings.

    Args:
        args: Parsed CLI namespace (uppercase dests as produced by ``args.parse_args``).
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        CliSettings: Effective settings.

    Raises:
        VersionParsingError: If a replacement version is empty.
        ValueError: If a replacement entry is malformed or a configured
            override version is not a string.
    """
    environ = os.environ if environ is None else environ
    settings = CliSettings()

    settings.config_path = _find_config_path(args, environ)
    config = load_config_file(settings.config_path)

    if config.get("log_level"):
        settings.log_level = str(config["log_level"]).upper()
    if "cache_ttl" in config:
        settings.cache_ttl = _as_int(config["cache_ttl"], settings.cache_ttl, "cache_ttl")
    if "cache_max_entries" in config:
        settings.cache_max_entries = _as_int(
            config["cache_max_entries"], settings.cache_max_entries, "cache_max_entries"
        )

    overrides_section = config.get("overrides") or {}
    if not isinstance(overrides_section, dict):
        logger.warning("Ignoring 'overrides' in %s: expected a mapping", settings.config_path)
        overrides_section = {}
    settings.overrides = VersionOverrides.from_mapping(overrides_section)

    env_level = environ.get(Constants.ENV_LOG_LEVEL)
    if env_level:
        settings.log_level = env_level.upper()
    env_replace = environ.get(Constants.ENV_REPLACE_VERSION)
    if env_replace:
        settings.overrides = settings.overrides.merged_with(VersionOverrides.from_string(env_replace))

    cli_level = getattr(args, "LOG_LEVEL", None)
    if cli_level:
        settings.log_level = str(cli_level).upper()
    cli_replace = getattr(args, "REPLACE_VERSION", None)
    if cli_replace:
        settings.overrides = settings.overrides.merged_with(VersionOverrides.from_string(cli_replace))

    if settings.log_level not in Constants.LOG_LEVELS:
        logger.warning("Unknown log level %s, using %s", settings.log_level, Constants.DEFAULT_LOG_LEVEL)
        settings.log_level = Constants.DEFAULT_LOG_LEVEL

    if len(settings.overrides):
        logger.debug("Version replacements active for: %s", ", ".join(sorted(settings.overrides.affected_mod_ids)))

    return settings

"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    PARSE_ERROR = 2
    EXIT_WARNINGS = 3
    UNSATISFIED = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    DEFAULT_LOG_LEVEL = "INFO"

    ENV_LOG_LEVEL = "MODVERSION_LOG_LEVEL"
    ENV_REPLACE_VERSION = "MODVERSION_REPLACE_VERSION"
    ENV_CONFIG = "MODVERSION_CONFIG"
    CONFIG_FILE = "modversion.yml"

    PREDICATE_CACHE_TTL_SEC = 3600
    PREDICATE_CACHE_MAX_ENTRIES = 10000

    DEPENDENCY_KEYS = ["depends", "recommends", "suggests", "conflicts", "breaks"]

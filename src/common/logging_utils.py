"""Logging helpers shared by the command line entry points."""

import logging
import os
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "modversion-console"


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level_name: Level to apply; defaults to the MODVERSION_LOG_LEVEL
            environment variable and then INFO. Calling this again only
            updates the level.
    """
    if level_name is None:
        level_name = os.environ.get(Constants.ENV_LOG_LEVEL, Constants.DEFAULT_LOG_LEVEL)
    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    if any(getattr(handler, "name", None) == _HANDLER_NAME for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True if ``logger`` would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records, dropping None values."""
    return {key: value for key, value in fields.items() if value is not None}

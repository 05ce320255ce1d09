"""Version parsing entry points.

``parse_version`` prefers the semantic form and falls back to an opaque
version; ``parse_semantic`` requires the semantic form.
"""

import logging
from typing import Optional

from .errors import VersionParsingError
from .models import StringVersion, Version
from .semantic import SemanticVersion

logger = logging.getLogger(__name__)


def parse_version(version: Optional[str], allow_wildcard: bool = False) -> Version:
    """Parse a version, falling back to an opaque version if it is not semantic.

    Args:
        version: Version notation.
        allow_wildcard: Accept a trailing ``x``/``X``/``*`` component.

    Returns:
        SemanticVersion when possible, StringVersion otherwise.

    Raises:
        VersionParsingError: If the notation is empty.
    """
    if not version:
        raise VersionParsingError("Version must be a non-empty string!")

    try:
        return SemanticVersion.parse(version, allow_wildcard)
    except VersionParsingError as exc:
        logger.debug("Treating '%s' as an opaque version: %s", version, exc)
        return StringVersion(version)


def parse_semantic(version: Optional[str]) -> SemanticVersion:
    """Parse a semantic version without wildcards.

    Raises:
        VersionParsingError: If the notation is empty or not semantic.
    """
    if not version:
        raise VersionParsingError("Version must be a non-empty string!")

    return SemanticVersion.parse(version, False)

"""Error types raised while parsing versions and version predicates."""


class VersionParsingError(ValueError):
    """Raised when a version literal or a range expression cannot be parsed.

    Callers loading dependency declarations are expected to reject the single
    offending declaration rather than abort.
    """

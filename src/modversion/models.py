"""Base version types shared by the parser, the interval algebra and predicates."""

from __future__ import annotations

from dataclasses import dataclass


def compare_strings(a: str, b: str) -> int:
    """Lexical three-way comparison returning -1, 0 or 1."""
    if a == b:
        return 0
    return -1 if a < b else 1


class Version:
    """A single version of a mod or package.

    Concrete versions are either structured (``SemanticVersion``) or opaque
    (``StringVersion``). Both expose ``friendly_string`` and ``compare_to``;
    the rich comparison operators delegate to ``compare_to`` while ``==``
    stays structural.
    """

    friendly_string: str

    def compare_to(self, other: Version) -> int:
        """Three-way comparison against another version.

        The base behaviour orders by the canonical string, which is all that
        can be done when at least one side is opaque.
        """
        return compare_strings(self.friendly_string, other.friendly_string)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __str__(self) -> str:
        return self.friendly_string


@dataclass(frozen=True)
class StringVersion(Version):
    """Opaque version for anything that is not a semantic version.

    Only equality is meaningful; ordering falls back to comparing strings.
    """

    friendly_string: str

    def __post_init__(self) -> None:
        if not self.friendly_string:
            raise ValueError("Opaque version must be a non-empty string")


"""Semantic versions: a superset of the semver.org format.

On top of semver this accepts

* any number of version core components, but at least one,
* ``x``, ``X`` or ``*`` as the last core component when parsing range
  literals (``1.2.x``),
* arbitrary build metadata after ``+``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import VersionParsingError
from .models import Version, compare_strings


class Wildcard(Enum):
    """Marker for a wildcard version component."""

    ANY = "x"

    def __str__(self) -> str:
        return self.value


WILDCARD = Wildcard.ANY
WILDCARD_TOKENS = ("x", "X", "*")

Component = Union[int, Wildcard]

# The empty alternative lets "1.0.0-" denote the lowest prerelease of 1.0.0.
DOT_SEPARATED_ID = re.compile(r"(?:[-0-9A-Za-z]+(?:\.[-0-9A-Za-z]+)*)?")
UNSIGNED_INTEGER = re.compile(r"0|[1-9][0-9]*")
_DIGITS = re.compile(r"[0-9]+")


def _compare_ints(a: int, b: int) -> int:
    return (a > b) - (a < b)


def _compare_prerelease(a: str, b: str) -> int:
    """Compare two prerelease strings identifier by identifier."""
    a_parts = [part for part in a.split(".") if part]
    b_parts = [part for part in b.split(".") if part]

    for part_a, part_b in zip(a_parts, b_parts):
        a_numeric = UNSIGNED_INTEGER.fullmatch(part_a) is not None
        b_numeric = UNSIGNED_INTEGER.fullmatch(part_b) is not None

        if a_numeric and b_numeric:
            compare = _compare_ints(len(part_a), len(part_b))
            if compare != 0:
                return compare
        elif a_numeric:
            return -1
        elif b_numeric:
            return 1

        compare = compare_strings(part_a, part_b)
        if compare != 0:
            return compare

    return _compare_ints(len(a_parts), len(b_parts))


def _parse_component(token: str) -> int:
    if not token.strip():
        raise VersionParsingError("Missing version number component!")
    if _DIGITS.fullmatch(token):
        return int(token)
    if token.startswith("-") and _DIGITS.fullmatch(token[1:]):
        raise VersionParsingError(f"Negative version number component '{token}'!")
    raise VersionParsingError(f"Could not parse version number component '{token}'!")


@dataclass(frozen=True, eq=False)
class SemanticVersion(Version):
    """A structured version with numeric components, prerelease and build.

    ``components`` may end with ``WILDCARD`` for range literals. Positions past
    the stored components read as ``0`` for plain versions and as
    ``WILDCARD`` for wildcard versions.

    Equality is structural (components with implicit zero padding, prerelease
    and build), while ordering ignores the build metadata.
    """

    components: Tuple[Component, ...]
    prerelease: Optional[str] = None
    build: Optional[str] = None
    friendly_string: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        components = tuple(self.components)
        if not components or components[0] is WILDCARD:
            raise ValueError(f"Invalid components: {components!r}")
        for pos, component in enumerate(components):
            if component is WILDCARD:
                if pos != len(components) - 1:
                    raise ValueError(f"Wildcard must be the last component: {components!r}")
            elif isinstance(component, bool) or not isinstance(component, int) or component < 0:
                raise ValueError(f"Invalid version component {component!r} in {components!r}")

        object.__setattr__(self, "components", components)
        object.__setattr__(self, "friendly_string", self._build_friendly_string())

    @classmethod
    def parse(cls, version: str, allow_wildcard: bool = False) -> SemanticVersion:
        """Parse a semantic version.

        Args:
            version: Version notation, e.g. ``1.2.3-beta.1+build.5``.
            allow_wildcard: Accept ``x``/``X``/``*`` as the last component.

        Returns:
            The parsed SemanticVersion.

        Raises:
            VersionParsingError: If the notation is not a semantic version.
        """
        build = None
        if "+" in version:
            version, build = version.split("+", 1)

        prerelease = None
        if "-" in version:
            version, prerelease = version.split("-", 1)
            if not DOT_SEPARATED_ID.fullmatch(prerelease):
                raise VersionParsingError(f"Invalid prerelease string '{prerelease}'!")

        if version.endswith("."):
            raise VersionParsingError("Missing version number component at the end!")
        if version.startswith("."):
            raise VersionParsingError("Missing version component!")

        components = []
        first_wildcard = -1

        for pos, token in enumerate(version.split(".")):
            if allow_wildcard:
                if token in WILDCARD_TOKENS:
                    if prerelease is not None:
                        raise VersionParsingError("Pre-release versions are not allowed to use X-ranges!")
                    components.append(WILDCARD)
                    if first_wildcard < 0:
                        first_wildcard = pos
                    continue
                if pos > 0 and components[pos - 1] is WILDCARD:
                    raise VersionParsingError("Interjacent wildcard (1.x.2) are disallowed!")

            components.append(_parse_component(token))

        if first_wildcard == 0:
            raise VersionParsingError("Versions of form 'x' or 'X' not allowed!")

        # 1.x.x -> 1.x
        if first_wildcard > 0:
            components = components[:first_wildcard + 1]

        return cls(tuple(components), prerelease, build)

    def _build_friendly_string(self) -> str:
        ret = ".".join(str(component) for component in self.components)
        if self.prerelease is not None:
            ret += "-" + self.prerelease
        if self.build is not None:
            ret += "+" + self.build
        return ret

    @property
    def component_count(self) -> int:
        return len(self.components)

    def get_component(self, pos: int) -> Component:
        """Return the component at ``pos``, repeating ``x`` or padding with ``0``."""
        if pos < 0:
            raise IndexError("Tried to access negative version number component!")
        if pos >= len(self.components):
            return WILDCARD if self.components[-1] is WILDCARD else 0
        return self.components[pos]

    def has_wildcard(self) -> bool:
        return any(component is WILDCARD for component in self.components)

    def equals_components_exactly(self, other: SemanticVersion) -> bool:
        for pos in range(max(len(self.components), len(other.components))):
            if self.get_component(pos) != other.get_component(pos):
                return False
        return True

    def compare_to(self, other: Version) -> int:
        if not isinstance(other, SemanticVersion):
            return compare_strings(self.friendly_string, other.friendly_string)

        for pos in range(max(len(self.components), len(other.components))):
            first = self.get_component(pos)
            second = other.get_component(pos)

            if first is WILDCARD or second is WILDCARD:
                continue

            compare = _compare_ints(first, second)
            if compare != 0:
                return compare

        if self.prerelease is None and other.prerelease is None:
            return 0

        if self.prerelease is not None and other.prerelease is not None:
            return _compare_prerelease(self.prerelease, other.prerelease)

        # A wildcard range endpoint swallows the release/prerelease difference.
        if self.has_wildcard() or other.has_wildcard():
            return 0

        return -1 if self.prerelease is not None else 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return (
            self.equals_components_exactly(other)
            and self.prerelease == other.prerelease
            and self.build == other.build
        )

    def __hash__(self) -> int:
        components = list(self.components)
        while len(components) > 1 and components[-1] == 0:
            components.pop()
        return hash((tuple(components), self.prerelease, self.build))

    def __repr__(self) -> str:
        return f"SemanticVersion({self.friendly_string!r})"

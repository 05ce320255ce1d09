"""Comparison operators usable in version predicates."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from .models import Version
from .semantic import SemanticVersion


class ComparisonOperator(Enum):
    """Operators of a predicate term, e.g. the ``>=`` in ``>=1.2.0``.

    Members are declared in tokenizing order so the longest token matches
    first (``>=`` before ``>``).
    """

    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER = ">"
    LESS = "<"
    EQUAL = "="
    SAME_TO_NEXT_MINOR = "~"
    SAME_TO_NEXT_MAJOR = "^"

    @property
    def serialized(self) -> str:
        return self.value

    @property
    def min_inclusive(self) -> bool:
        return _OPERATOR_TABLE[self].min_inclusive

    @property
    def max_inclusive(self) -> bool:
        return _OPERATOR_TABLE[self].max_inclusive

    def test(self, a: Version, b: Version) -> bool:
        """Return whether ``a <op> b`` holds.

        Opaque versions only support equality: the result is string equality
        for operators with an inclusive bound and False otherwise.
        """
        if isinstance(a, SemanticVersion) and isinstance(b, SemanticVersion):
            return _OPERATOR_TABLE[self].test(a, b)
        if self.min_inclusive or self.max_inclusive:
            return a.friendly_string == b.friendly_string
        return False

    def min_version(self, version: SemanticVersion) -> Optional[SemanticVersion]:
        derive = _OPERATOR_TABLE[self].min_version
        return derive(version) if derive is not None else None

    def max_version(self, version: SemanticVersion) -> Optional[SemanticVersion]:
        derive = _OPERATOR_TABLE[self].max_version
        return derive(version) if derive is not None else None

    @classmethod
    def split_prefix(cls, token: str) -> Tuple[ComparisonOperator, str]:
        """Split the longest operator prefix off ``token``, defaulting to ``=``."""
        for operator in cls:
            if token.startswith(operator.value):
                return operator, token[len(operator.value):]
        return cls.EQUAL, token


class OperatorSpec(NamedTuple):
    """Test function and interval bound derivation of one operator."""

    test: Callable[[SemanticVersion, SemanticVersion], bool]
    min_inclusive: bool
    max_inclusive: bool
    min_version: Optional[Callable[[SemanticVersion], SemanticVersion]] = None
    max_version: Optional[Callable[[SemanticVersion], SemanticVersion]] = None


def _same(version: SemanticVersion) -> SemanticVersion:
    return version


def _next_minor(version: SemanticVersion) -> SemanticVersion:
    # The empty prerelease sorts below every 1.3.0-*, keeping those out of ~1.2.
    return SemanticVersion((version.get_component(0), version.get_component(1) + 1), "", None)


def _next_major(version: SemanticVersion) -> SemanticVersion:
    return SemanticVersion((version.get_component(0) + 1,), "", None)


def _same_minor(a: SemanticVersion, b: SemanticVersion) -> bool:
    return (
        a.compare_to(b) >= 0
        and a.get_component(0) == b.get_component(0)
        and a.get_component(1) == b.get_component(1)
    )


def _same_major(a: SemanticVersion, b: SemanticVersion) -> bool:
    return a.compare_to(b) >= 0 and a.get_component(0) == b.get_component(0)


_OPERATOR_TABLE: Dict[ComparisonOperator, OperatorSpec] = {
    ComparisonOperator.GREATER_EQUAL: OperatorSpec(
        lambda a, b: a.compare_to(b) >= 0, True, False, min_version=_same
    ),
    ComparisonOperator.LESS_EQUAL: OperatorSpec(
        lambda a, b: a.compare_to(b) <= 0, False, True, max_version=_same
    ),
    ComparisonOperator.GREATER: OperatorSpec(
        lambda a, b: a.compare_to(b) > 0, False, False, min_version=_same
    ),
    ComparisonOperator.LESS: OperatorSpec(
        lambda a, b: a.compare_to(b) < 0, False, False, max_version=_same
    ),
    ComparisonOperator.EQUAL: OperatorSpec(
        lambda a, b: a.compare_to(b) == 0, True, True, min_version=_same, max_version=_same
    ),
    ComparisonOperator.SAME_TO_NEXT_MINOR: OperatorSpec(
        _same_minor, True, False, min_version=_same, max_version=_next_minor
    ),
    ComparisonOperator.SAME_TO_NEXT_MAJOR: OperatorSpec(
        _same_major, True, False, min_version=_same, max_version=_next_major
    ),
}

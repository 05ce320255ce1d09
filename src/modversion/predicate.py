"""Version predicates parsed from range expressions such as ``>=1.2 <2``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from .errors import VersionParsingError
from .interval import INFINITE, VersionInterval, intersect
from .models import Version
from .operators import ComparisonOperator
from .parser import parse_version
from .semantic import SemanticVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredicateTerm:
    """A single ``<operator><version>`` term of a predicate."""

    operator: ComparisonOperator
    reference_version: Version

    def test(self, version: Version) -> bool:
        return self.operator.test(version, self.reference_version)

    @property
    def interval(self) -> VersionInterval:
        """Interval of versions matched by this term alone."""
        ref = self.reference_version
        if isinstance(ref, SemanticVersion):
            return VersionInterval.of(
                self.operator.min_version(ref), self.operator.min_inclusive,
                self.operator.max_version(ref), self.operator.max_inclusive,
            )
        return VersionInterval.of(ref, True, ref, True)

    def __str__(self) -> str:
        return f"{self.operator.serialized}{self.reference_version}"


@dataclass(frozen=True)
class VersionPredicate:
    """Conjunction of predicate terms; no terms matches every version."""

    terms: Tuple[PredicateTerm, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))

    def test(self, version: Version) -> bool:
        """Return whether ``version`` satisfies every term."""
        if version is None:
            raise TypeError("version must not be None")
        return all(term.test(version) for term in self.terms)

    @property
    def interval(self) -> Optional[VersionInterval]:
        """Interval covered by all terms together, None if they exclude each other."""
        if not self.terms:
            return INFINITE

        ret = self.terms[0].interval
        for term in self.terms[1:]:
            ret = intersect(ret, term.interval)
            if ret is None:
                logger.debug("Predicate '%s' covers no versions", self)
                break
        return ret

    def __str__(self) -> str:
        if not self.terms:
            return "*"
        return " ".join(str(term) for term in self.terms)

    @classmethod
    def parse(cls, predicate: str) -> VersionPredicate:
        return parse_predicate(predicate)

    @classmethod
    def parse_all(cls, predicates: Iterable[str]) -> Set[VersionPredicate]:
        return {parse_predicate(predicate) for predicate in predicates}


ANY = VersionPredicate()


def _rewrite_wildcard(
    predicate: str, operator: ComparisonOperator, version: SemanticVersion
) -> Tuple[ComparisonOperator, SemanticVersion]:
    """Turn ``1.x`` into ``^1`` and ``1.2.x`` into ``~1.2``."""
    if operator is not ComparisonOperator.EQUAL:
        raise VersionParsingError(
            f"Invalid predicate: {predicate}, version ranges with wildcards (.X) require using "
            "the equality operator or no operator at all!"
        )
    if version.prerelease is not None:
        raise VersionParsingError(
            f"Invalid predicate: {predicate}, pre-release versions are not allowed to use X-ranges!"
        )

    count = version.component_count
    if count == 2:
        operator = ComparisonOperator.SAME_TO_NEXT_MAJOR
    elif count == 3:
        operator = ComparisonOperator.SAME_TO_NEXT_MINOR
    else:
        raise VersionParsingError(
            f"Invalid predicate: {predicate}, wildcards are only supported as the second or third component!"
        )

    rewritten = SemanticVersion(version.components[:-1], "", version.build)
    logger.debug("Rewrote wildcard range %s as %s%s", version, operator.serialized, rewritten)
    return operator, rewritten


def parse_predicate(predicate: str) -> VersionPredicate:
    """Parse a whitespace separated range expression.

    Args:
        predicate: Range expression, e.g. ``>=1.2.0 <2.0.0``, ``^1.4`` or ``1.2.x``.

    Returns:
        The parsed VersionPredicate, ``ANY`` if the expression has no terms.

    Raises:
        VersionParsingError: If any term is invalid.
    """
    terms = []

    for token in predicate.split():
        if token == "*":
            continue

        operator, remainder = ComparisonOperator.split_prefix(token)
        if not remainder:
            raise VersionParsingError(
                f"Invalid predicate: {predicate}, missing version after '{operator.serialized}'!"
            )

        version = parse_version(remainder, True)

        if isinstance(version, SemanticVersion):
            if version.has_wildcard():
                operator, version = _rewrite_wildcard(predicate, operator, version)
        elif operator is not ComparisonOperator.EQUAL:
            raise VersionParsingError(
                f"Invalid predicate: {predicate}, version ranges need to be semantic version "
                f"compatible to use the '{operator.serialized}' operator!"
            )

        terms.append(PredicateTerm(operator, version))

    if not terms:
        return ANY

    return VersionPredicate(tuple(terms))

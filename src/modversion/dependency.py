"""Dependency declarations: a relationship kind plus version requirements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .interval import VersionInterval, complement_all, union
from .models import Version
from .predicate import VersionPredicate


class DependencyKind(Enum):
    """Kind of dependency relationship.

    Args:
        key: Key used in metadata files.
        positive: Whether the dependency encourages the target instead of discouraging it.
        soft: Whether an unmet dependency only warns.
    """

    DEPENDS = ("depends", True, False)
    RECOMMENDS = ("recommends", True, True)
    SUGGESTS = ("suggests", True, True)
    CONFLICTS = ("conflicts", False, True)
    BREAKS = ("breaks", False, False)

    def __init__(self, key: str, positive: bool, soft: bool):
        self.key = key
        self.positive = positive
        self.soft = soft

    @classmethod
    def parse(cls, key: str) -> Optional[DependencyKind]:
        """Look up a kind by its metadata key, None if unknown."""
        return _KIND_BY_KEY.get(key)


_KIND_BY_KEY: Dict[str, DependencyKind] = {kind.key: kind for kind in DependencyKind}


@dataclass(frozen=True)
class ModDependency:
    """A dependency on ``mod_id`` matching any of ``matchers``."""

    kind: DependencyKind
    mod_id: str
    matchers: Tuple[str, ...] = field(compare=False)
    predicates: FrozenSet[VersionPredicate] = field(init=False)

    def __post_init__(self) -> None:
        matchers: Union[str, Iterable[str]] = self.matchers
        if isinstance(matchers, str):
            matchers = (matchers,)
        matchers = tuple(matchers)
        object.__setattr__(self, "matchers", matchers)
        object.__setattr__(self, "predicates", frozenset(VersionPredicate.parse_all(matchers)))

    def matches(self, version: Version) -> bool:
        """Return whether ``version`` fulfils any of the version requirements."""
        return any(predicate.test(version) for predicate in self.predicates)

    def is_satisfied_by(self, version: Version) -> bool:
        """Apply the dependency kind: positive kinds need a match, negative kinds need none."""
        return self.matches(version) == self.kind.positive

    def version_intervals(self) -> List[VersionInterval]:
        """Intervals covered by the version requirements; may be disjoint."""
        ret: List[VersionInterval] = []
        for predicate in self.predicates:
            ret = union(ret, predicate.interval)
        return ret

    def allowed_intervals(self) -> List[VersionInterval]:
        """Intervals of target versions compatible with this dependency."""
        if self.kind.positive:
            return self.version_intervals()
        return complement_all(self.version_intervals())

    def __str__(self) -> str:
        return f"{{{self.kind.key} {self.mod_id} @ [{' || '.join(self.matchers)}]}}"

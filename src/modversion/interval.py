"""Version intervals and the set algebra over them.

A ``VersionInterval`` is contiguous; disjoint ranges are lists of intervals
kept sorted and non-touching by ``union``. An empty result is ``None`` for a
single interval and ``[]`` for a collection.

Opaque (non-semantic) versions have no ordering, so intervals bounded by
them are only ever combined by equality of the bound versions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .models import Version
from .semantic import SemanticVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bound:
    """One end of an interval: the version and whether it is included."""

    version: Version
    inclusive: bool

    @property
    def is_semantic(self) -> bool:
        return isinstance(self.version, SemanticVersion)


@dataclass(frozen=True)
class VersionInterval:
    """A contiguous range of versions, each side optionally unbounded."""

    lower: Optional[Bound] = None
    upper: Optional[Bound] = None

    def __post_init__(self) -> None:
        lower, upper = self.lower, self.upper
        if lower is None or upper is None:
            return
        if lower.is_semantic and upper.is_semantic:
            if lower.version.compare_to(upper.version) > 0:
                raise ValueError(f"Interval lower bound {lower.version} exceeds upper bound {upper.version}")
        elif lower.version != upper.version:
            raise ValueError(
                f"Interval with non-semantic bounds must be a single version: {lower.version}, {upper.version}"
            )

    @classmethod
    def of(
        cls,
        min_version: Optional[Version] = None,
        min_inclusive: bool = False,
        max_version: Optional[Version] = None,
        max_inclusive: bool = False,
    ) -> VersionInterval:
        """Build an interval from loose bound values; absent bounds drop their flag."""
        lower = Bound(min_version, min_inclusive) if min_version is not None else None
        upper = Bound(max_version, max_inclusive) if max_version is not None else None
        return cls(lower, upper)

    @property
    def min(self) -> Optional[Version]:
        return self.lower.version if self.lower is not None else None

    @property
    def min_inclusive(self) -> bool:
        return self.lower.inclusive if self.lower is not None else False

    @property
    def max(self) -> Optional[Version]:
        return self.upper.version if self.upper is not None else None

    @property
    def max_inclusive(self) -> bool:
        return self.upper.inclusive if self.upper is not None else False

    @property
    def is_semantic(self) -> bool:
        """True if every present bound is a SemanticVersion."""
        return (self.lower is None or self.lower.is_semantic) and (
            self.upper is None or self.upper.is_semantic
        )

    @property
    def is_infinite(self) -> bool:
        return self.lower is None and self.upper is None

    def contains(self, version: Version) -> bool:
        """Return whether ``version`` lies within this interval."""
        if not self.is_semantic or not isinstance(version, SemanticVersion):
            return all(
                bound.inclusive and bound.version.friendly_string == version.friendly_string
                for bound in (self.lower, self.upper)
                if bound is not None
            )

        if self.lower is not None:
            cmp = version.compare_to(self.lower.version)
            if cmp < 0 or cmp == 0 and not self.lower.inclusive:
                return False
        if self.upper is not None:
            cmp = version.compare_to(self.upper.version)
            if cmp > 0 or cmp == 0 and not self.upper.inclusive:
                return False
        return True

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.contains(version)

    def and_(self, other: Optional[VersionInterval]) -> Optional[VersionInterval]:
        return intersect(self, other)

    def or_(self, others: Iterable[VersionInterval]) -> List[VersionInterval]:
        return union(others, self)

    def not_(self) -> List[VersionInterval]:
        return complement(self)

    def __str__(self) -> str:
        if self.lower is None:
            if self.upper is None:
                return "(-∞,∞)"
            return f"(-∞,{self.upper.version}{']' if self.upper.inclusive else ')'}"
        if self.upper is None:
            return f"{'[' if self.lower.inclusive else '('}{self.lower.version},∞)"
        return (
            f"{'[' if self.lower.inclusive else '('}{self.lower.version},"
            f"{self.upper.version}{']' if self.upper.inclusive else ')'}"
        )


INFINITE = VersionInterval()


def intersect(a: Optional[VersionInterval], b: Optional[VersionInterval]) -> Optional[VersionInterval]:
    """Compute the intersection of two intervals, None if it is empty."""
    if a is None or b is None:
        return None

    if not a.is_semantic or not b.is_semantic:
        return _intersect_plain(a, b)

    return _intersect_semantic(a, b)


def _intersect_plain(a: VersionInterval, b: VersionInterval) -> Optional[VersionInterval]:
    bounds = [bound for bound in (a.lower, a.upper, b.lower, b.upper) if bound is not None]
    if not bounds:
        return INFINITE

    # without an ordering the only shared point can be the common bound version
    version = bounds[0].version
    if any(bound.version != version for bound in bounds):
        return None

    lower = _combine_plain_bounds(a.lower, b.lower)
    upper = _combine_plain_bounds(a.upper, b.upper)

    if lower is not None and upper is not None and not (lower.inclusive and upper.inclusive):
        return None

    return VersionInterval(lower, upper)


def _combine_plain_bounds(a: Optional[Bound], b: Optional[Bound]) -> Optional[Bound]:
    if a is None:
        return b
    if b is None:
        return a
    return Bound(a.version, a.inclusive and b.inclusive)


def _intersect_semantic(a: VersionInterval, b: VersionInterval) -> Optional[VersionInterval]:
    min_cmp = _compare_min(a, b)
    max_cmp = _compare_max(a, b)

    if min_cmp == 0:  # aMin == bMin
        if max_cmp == 0:  # a == b
            return a
        return a if max_cmp < 0 else b

    if max_cmp == 0:  # aMax == bMax, aMin != bMin
        return b if min_cmp < 0 else a

    if min_cmp < 0:  # aMin < bMin -> b..min(aMax, bMax)
        if max_cmp > 0:  # b inside a
            return b

        cmp = b.min.compare_to(a.max)
        if cmp < 0 or cmp == 0 and b.min_inclusive and a.max_inclusive:
            return VersionInterval(b.lower, a.upper)
        return None

    # aMin > bMin -> a..min(aMax, bMax)
    if max_cmp < 0:  # a inside b
        return a

    cmp = a.min.compare_to(b.max)
    if cmp < 0 or cmp == 0 and a.min_inclusive and b.max_inclusive:
        return VersionInterval(a.lower, b.upper)
    return None


def intersect_all(a: Iterable[VersionInterval], b: Iterable[VersionInterval]) -> List[VersionInterval]:
    """Compute the intersection of two collections of disjoint intervals."""
    a = list(a)
    b = list(b)
    if not a or not b:
        return []

    if len(a) == 1 and len(b) == 1:
        merged = intersect(a[0], b[0])
        return [merged] if merged is not None else []

    # (a0 || a1) && (b0 || b1) == a0 && b0 || a0 && b1 || a1 && b0 || a1 && b1
    all_merged = []
    for interval_a in a:
        for interval_b in b:
            merged = intersect(interval_a, interval_b)
            if merged is not None:
                all_merged.append(merged)

    if len(all_merged) <= 1:
        return all_merged

    ret: List[VersionInterval] = []
    for interval in all_merged:
        _merge(interval, ret)
    return ret


def union(a: Iterable[Optional[VersionInterval]], b: Optional[VersionInterval]) -> List[VersionInterval]:
    """Merge ``b`` into the intervals ``a``, returning a disjoint sorted list."""
    a = list(a)
    if not a:
        return [b] if b is not None else []

    ret: List[VersionInterval] = []
    for interval in a:
        _merge(interval, ret)
    _merge(b, ret)
    return ret


def union_all(intervals: Iterable[Optional[VersionInterval]]) -> List[VersionInterval]:
    """Compute the union of any number of intervals."""
    ret: List[VersionInterval] = []
    for interval in intervals:
        _merge(interval, ret)
    return ret


def _merge(a: Optional[VersionInterval], out: List[VersionInterval]) -> None:
    if a is None:
        return

    if not out:
        out.append(a)
        return

    if len(out) == 1 and out[0].is_infinite:
        return

    if not a.is_semantic:
        _merge_plain(a, out)
    else:
        _merge_semantic(a, out)


def _plain_version(interval: VersionInterval) -> Version:
    return interval.min if interval.min is not None else interval.max


def _plain_shape(interval: VersionInterval) -> Tuple[bool, bool, bool]:
    """Describe a plain interval as (covers below, covers the version, covers above)."""
    below = interval.lower is None
    above = interval.upper is None
    point = (below or interval.min_inclusive) and (above or interval.max_inclusive)
    return below, point, above


def _plain_intervals(version: Version, below: bool, point: bool, above: bool) -> List[VersionInterval]:
    if below and above:
        return [
            VersionInterval(None, Bound(version, False)),
            VersionInterval(Bound(version, False), None),
        ]
    if below:
        return [VersionInterval(None, Bound(version, point))]
    if above:
        return [VersionInterval(Bound(version, point), None)]
    if point:
        return [VersionInterval(Bound(version, True), Bound(version, True))]
    return []


def _merge_plain(a: VersionInterval, out: List[VersionInterval]) -> None:
    version = _plain_version(a)
    matches = [
        pos for pos, c in enumerate(out)
        if not c.is_semantic and _plain_version(c) == version
    ]

    if not matches:
        out.append(a)
        return

    below, point, above = _plain_shape(a)
    for pos in matches:
        c_below, c_point, c_above = _plain_shape(out[pos])
        below, point, above = below or c_below, point or c_point, above or c_above

    if below and point and above:
        out[:] = [INFINITE]
        return

    for pos in reversed(matches):
        del out[pos]
    out[matches[0]:matches[0]] = _plain_intervals(version, below, point, above)


def _touches_before(a: VersionInterval, c: VersionInterval) -> bool:
    """Whether a's upper end reaches c's lower end; exclusive on both sides keeps them apart."""
    cmp = a.max.compare_to(c.min)
    return not (cmp < 0 or cmp == 0 and not a.max_inclusive and not c.min_inclusive)


def _merge_semantic(a: VersionInterval, out: List[VersionInterval]) -> None:
    if a.is_infinite:
        out[:] = [INFINITE]
        return

    pos = 0
    while pos < len(out):
        c = out[pos]
        if not c.is_semantic:
            pos += 1
            continue

        if a.lower is None:  # ..a..]
            if c.upper is None:  # ..a..] [..c..
                if _touches_before(a, c):
                    out[:] = [INFINITE]
                else:
                    out.insert(pos, a)
                return

            if _compare_max(a, c) >= 0:  # a encompasses c
                del out[pos]
                continue

            if c.lower is None:  # c encompasses a
                return

            if _touches_before(a, c):  # c extends a to the right
                out[pos] = VersionInterval(None, c.upper)
            else:
                out.insert(pos, a)
            return

        if c.upper is None:  # [..c..
            if _compare_min(a, c) >= 0:  # c encompasses a
                return

            if a.upper is None:  # a encompasses c and everything after it
                del out[pos:]
                out.append(a)
            elif _touches_before(a, c):  # a extends c to the left
                out[pos] = VersionInterval(a.lower, None)
            else:
                out.insert(pos, a)
            return

        cmp = a.min.compare_to(c.max)
        if cmp < 0 or cmp == 0 and (a.min_inclusive or c.max_inclusive):  # a starts before c ends
            if a.upper is None or c.lower is None or _touches_before(a, c):  # overlapping or adjacent
                cmp_min = _compare_min(a, c)
                cmp_max = _compare_max(a, c)

                if cmp_max <= 0:  # aMax <= cMax
                    if cmp_min < 0:  # aMin < cMin
                        out[pos] = VersionInterval(a.lower, c.upper)
                    return

                if cmp_min > 0:  # aMin > cMin, aMax > cMax
                    a = VersionInterval(c.lower, a.upper)
                    if a.is_infinite:
                        out[:] = [INFINITE]
                        return

                del out[pos]
                continue

            out.insert(pos, a)
            return

        pos += 1

    out.append(a)


def _compare_min(a: VersionInterval, b: VersionInterval) -> int:
    """Order two lower bounds; an exclusive bound is greater than an inclusive one at the same version."""
    if a.lower is None:
        return 0 if b.lower is None else -1
    if b.lower is None:
        return 1

    cmp = a.min.compare_to(b.min)
    if cmp > 0 or cmp == 0 and not a.min_inclusive and b.min_inclusive:
        return 1
    if cmp < 0 or a.min_inclusive and not b.min_inclusive:
        return -1
    return 0


def _compare_max(a: VersionInterval, b: VersionInterval) -> int:
    """Order two upper bounds; an exclusive bound is smaller than an inclusive one at the same version."""
    if a.upper is None:
        return 0 if b.upper is None else 1
    if b.upper is None:
        return -1

    cmp = a.max.compare_to(b.max)
    if cmp < 0 or cmp == 0 and not a.max_inclusive and b.max_inclusive:
        return -1
    if cmp > 0 or a.max_inclusive and not b.max_inclusive:
        return 1
    return 0


def complement(interval: Optional[VersionInterval]) -> List[VersionInterval]:
    """Compute the versions outside ``interval`` as 0, 1 or 2 intervals."""
    if interval is None:  # empty -> everything
        return [INFINITE]

    if interval.lower is None:
        if interval.upper is None:  # (-∞,∞) -> empty
            return []
        return [VersionInterval(Bound(interval.max, not interval.max_inclusive), None)]

    if interval.upper is None:
        return [VersionInterval(None, Bound(interval.min, not interval.min_inclusive))]

    if interval.min == interval.max and not interval.min_inclusive and not interval.max_inclusive:
        # (x,x) is empty
        return [INFINITE]

    return [
        VersionInterval(None, Bound(interval.min, not interval.min_inclusive)),
        VersionInterval(Bound(interval.max, not interval.max_inclusive), None),
    ]


def complement_all(intervals: Iterable[Optional[VersionInterval]]) -> List[VersionInterval]:
    """Compute the complement of a collection of disjoint intervals."""
    intervals = list(intervals)
    if not intervals:
        return [INFINITE]
    if len(intervals) == 1:
        return complement(intervals[0])

    # !(i0 || i1 || i2) == !i0 && !i1 && !i2
    ret: Optional[List[VersionInterval]] = None
    for interval in intervals:
        inverted = complement(interval)
        ret = inverted if ret is None else intersect_all(ret, inverted)
        if not ret:
            logger.debug("Complement of %d intervals is empty", len(intervals))
            break

    return ret

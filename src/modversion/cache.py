"""TTL cache for parsed version predicates."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import NamedTuple, Optional

from .predicate import VersionPredicate, parse_predicate


class _Slot(NamedTuple):
    predicate: VersionPredicate
    expires_at: float


class PredicateCache:
    """TTL cache of predicates keyed by their literal range expression.

    Predicates are immutable, so cached instances can be handed to any
    number of callers and threads. Entries are kept in insertion order;
    above ``max_entries`` the least recently stored ones are dropped.
    """

    def __init__(self, default_ttl: int = 3600, max_entries: int = 10000):
        """Initialize the predicate cache.

        Args:
            default_ttl: Default time-to-live in seconds.
            max_entries: Maximum number of cached predicates.
        """
        self._default_ttl = default_ttl
        self._max_entries = max(1, max_entries)
        self._slots: "OrderedDict[str, _Slot]" = OrderedDict()
        self._lock = threading.Lock()
        self._next_sweep = time.time() + 60

    def get(self, expression: str) -> Optional[VersionPredicate]:
        """Return the cached predicate, or None if absent or expired."""
        with self._lock:
            now = time.time()
            self._sweep_expired(now)

            slot = self._slots.get(expression)
            if slot is None:
                return None
            if now > slot.expires_at:
                del self._slots[expression]
                return None
            return slot.predicate

    def set(self, expression: str, predicate: VersionPredicate, ttl: Optional[int] = None) -> None:
        """Cache a predicate.

        Args:
            expression: Literal range expression.
            predicate: Parsed predicate.
            ttl: Optional TTL override in seconds.
        """
        with self._lock:
            now = time.time()
            self._sweep_expired(now)

            self._slots[expression] = _Slot(predicate, now + (self._default_ttl if ttl is None else ttl))
            self._slots.move_to_end(expression)
            while len(self._slots) > self._max_entries:
                self._slots.popitem(last=False)

    def get_or_parse(self, expression: str) -> VersionPredicate:
        """Return the cached predicate for ``expression``, parsing it on a miss.

        Raises:
            VersionParsingError: If the expression is invalid; failures are not cached.
        """
        predicate = self.get(expression)
        if predicate is None:
            predicate = parse_predicate(expression)
            self.set(expression, predicate)
        return predicate

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def _sweep_expired(self, now: float) -> None:
        # at most once a minute; lookups drop stale entries on their own
        if now < self._next_sweep:
            return
        self._next_sweep = now + 60
        for expression in [k for k, slot in self._slots.items() if now > slot.expires_at]:
            del self._slots[expression]

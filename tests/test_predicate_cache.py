"""Tests for the predicate cache."""

from unittest.mock import patch

import pytest

from modversion import PredicateCache, VersionParsingError, parse_predicate


class TestPredicateCache:
    """Tests for PredicateCache."""

    def setup_method(self):
        """Set up test fixtures."""
        self.cache = PredicateCache(default_ttl=3600, max_entries=100)

    def test_miss(self):
        assert self.cache.get(">=1.0") is None

    def test_set_and_get(self):
        predicate = parse_predicate(">=1.0")
        self.cache.set(">=1.0", predicate)
        assert self.cache.get(">=1.0") is predicate
        assert len(self.cache) == 1

    def test_get_or_parse_reuses_instance(self):
        """Test that the second lookup returns the cached predicate."""
        first = self.cache.get_or_parse("^1.2.3")
        second = self.cache.get_or_parse("^1.2.3")
        assert first is second
        assert first == parse_predicate("^1.2.3")

    def test_parse_failures_not_cached(self):
        with pytest.raises(VersionParsingError):
            self.cache.get_or_parse(">=1.x")
        assert len(self.cache) == 0

    def test_expiry(self):
        """Test that entries expire after their TTL."""
        with patch("modversion.cache.time.time", return_value=1000.0):
            self.cache.set(">=1.0", parse_predicate(">=1.0"), ttl=10)

        with patch("modversion.cache.time.time", return_value=1005.0):
            assert self.cache.get(">=1.0") is not None

        with patch("modversion.cache.time.time", return_value=1011.0):
            assert self.cache.get(">=1.0") is None

    def test_eviction(self):
        """Test that the oldest entries are evicted above the size limit."""
        cache = PredicateCache(default_ttl=3600, max_entries=10)
        for minor in range(11):
            with patch("modversion.cache.time.time", return_value=1000.0 + minor):
                cache.set(f">=1.{minor}", parse_predicate(f">=1.{minor}"))

        assert len(cache) == 10
        with patch("modversion.cache.time.time", return_value=1020.0):
            assert cache.get(">=1.0") is None
            assert cache.get(">=1.10") is not None

    def test_storing_again_refreshes_position(self):
        cache = PredicateCache(default_ttl=3600, max_entries=2)
        cache.get_or_parse(">=1.0")
        cache.get_or_parse(">=2.0")
        cache.set(">=1.0", parse_predicate(">=1.0"))
        cache.get_or_parse(">=3.0")

        assert cache.get(">=1.0") is not None
        assert cache.get(">=2.0") is None
        assert len(cache) == 2

    def test_sweep_drops_expired_entries(self):
        """Test that the periodic sweep removes stale entries that are never looked up."""
        with patch("modversion.cache.time.time", return_value=1000.0):
            cache = PredicateCache(default_ttl=10, max_entries=100)
            cache.set(">=1.0", parse_predicate(">=1.0"))

        with patch("modversion.cache.time.time", return_value=1100.0):
            cache.set(">=2.0", parse_predicate(">=2.0"))
            assert len(cache) == 1

    def test_clear(self):
        self.cache.get_or_parse(">=1.0")
        self.cache.clear()
        assert len(self.cache) == 0

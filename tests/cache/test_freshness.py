"""Tests for the in-memory freshness cache.

Time is controlled by a fake clock; no sleeping.
"""

import threading
import time
from datetime import timedelta

import pytest

from avalanchewatch.cache import RESOURCE_KEYS, CacheEntry, FreshnessCache


class TestCacheEntry:
    def test_is_fresh(self, clock):
        entry = CacheEntry(payload="x", fetched_at=clock())

        assert entry.is_fresh(clock() + timedelta(hours=5), timedelta(hours=6))
        assert not entry.is_fresh(clock() + timedelta(hours=6), timedelta(hours=6))


class TestGetPut:
    """Tests for basic hit/miss behaviour."""

    def test_initial_state(self, cache):
        """Cache should start empty."""
        assert cache.get("avalanche") is None
        assert cache.fetched_at("avalanche") is None

    def test_hit_within_ttl(self, cache, clock):
        cache.put("avalanche", {"risk": 3})
        clock.advance(hours=5, minutes=59)

        assert cache.get("avalanche") == {"risk": 3}

    def test_miss_after_ttl(self, cache, clock):
        cache.put("avalanche", {"risk": 3})
        clock.advance(hours=6)

        assert cache.get("avalanche") is None

    def test_put_overwrites_fresh_entry(self, cache, clock):
        cache.put("avalanche", "old")
        clock.advance(minutes=10)
        cache.put("avalanche", "new")

        assert cache.get("avalanche") == "new"
        assert cache.fetched_at("avalanche") == clock()

    def test_keys_are_independent(self, cache):
        cache.put("avalanche", "bulletin")

        assert cache.get("warnings") is None

    def test_variant_mismatch_is_miss(self, cache):
        cache.put("forecast", "alps", variant=(45.4, 6.57, 7))

        assert cache.get("forecast", variant=(45.4, 6.57, 7)) == "alps"
        assert cache.get("forecast", variant=(45.4, 6.57, 3)) is None

    def test_new_variant_replaces_slot(self, cache):
        cache.put("forecast", "alps", variant=(45.4, 6.57, 7))
        cache.put("forecast", "pyrenees", variant=(42.8, 0.1, 7))

        assert cache.get("forecast", variant=(45.4, 6.57, 7)) is None
        assert cache.get("forecast", variant=(42.8, 0.1, 7)) == "pyrenees"

    def test_status(self, cache, clock):
        cache.put("warnings", "w")

        status = cache.status()

        assert set(status) == set(RESOURCE_KEYS)
        assert status["warnings"] == clock()
        assert status["avalanche"] is None

    def test_clear(self, cache):
        cache.put("avalanche", "a")
        cache.clear()

        assert cache.get("avalanche") is None


class TestGetOrFetch:
    """Tests for fetch-on-miss."""

    def test_fetches_once_within_ttl(self, cache):
        calls = []

        def fetch():
            calls.append(1)
            return "payload"

        assert cache.get_or_fetch("avalanche", fetch) == "payload"
        assert cache.get_or_fetch("avalanche", fetch) == "payload"
        assert len(calls) == 1

    def test_refetches_after_ttl(self, cache, clock):
        values = iter(["first", "second"])

        cache.get_or_fetch("avalanche", lambda: next(values))
        clock.advance(hours=7)

        assert cache.get_or_fetch("avalanche", lambda: next(values)) == "second"

    def test_fetch_error_propagates_and_stores_nothing(self, cache):
        def fetch():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            cache.get_or_fetch("forecast", fetch)

        assert cache.fetched_at("forecast") is None

    def test_concurrent_misses_collapse(self):
        cache = FreshnessCache(ttl=timedelta(hours=6))
        calls = []
        start = threading.Barrier(5)

        def fetch():
            calls.append(1)
            time.sleep(0.05)
            return "payload"

        def worker():
            start.wait()
            results.append(cache.get_or_fetch("avalanche", fetch))

        results = []
        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["payload"] * 5
        assert len(calls) == 1

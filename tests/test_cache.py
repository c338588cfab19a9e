"""Tests for the formatted-result cache."""
from __future__ import annotations

from reading_formatter.cache import DEFAULT_TTL_SECONDS, ResultCache


class TestMakeKey:
    def test_topic_and_prefix(self):
        cache = ResultCache()
        key = cache.make_key("Paris", "x" * 500)
        assert key == "Paris-" + "x" * 100

    def test_same_prefix_same_key(self):
        cache = ResultCache()
        a = cache.make_key("Paris", "y" * 100 + "tail one")
        b = cache.make_key("Paris", "y" * 100 + "tail two")
        assert a == b

    def test_topic_distinguishes(self):
        cache = ResultCache()
        assert cache.make_key("Paris", "text") != cache.make_key("Rome", "text")

    def test_custom_prefix_length(self):
        cache = ResultCache(key_prefix_length=4)
        assert cache.make_key("T", "abcdefgh") == "T-abcd"


class TestGetPut:
    def test_miss(self):
        assert ResultCache().get("nothing") is None

    def test_hit(self, sample_test, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", sample_test)
        assert cache.get("k") is sample_test

    def test_expires_after_ttl(self, sample_test, clock):
        cache = ResultCache(clock=clock)
        cache.put("k", sample_test)
        clock.now += DEFAULT_TTL_SECONDS - 1
        assert cache.get("k") is sample_test
        clock.now += 1
        assert cache.get("k") is None

    def test_expired_entry_not_evicted(self, sample_test, clock):
        cache = ResultCache(ttl_seconds=10, clock=clock)
        cache.put("k", sample_test)
        clock.now += 60
        assert cache.get("k") is None
        assert len(cache) == 1

    def test_put_refreshes_timestamp(self, sample_test, clock):
        cache = ResultCache(ttl_seconds=10, clock=clock)
        cache.put("k", sample_test)
        clock.now += 60
        cache.put("k", sample_test)
        assert cache.get("k") is sample_test

    def test_clear(self, sample_test):
        cache = ResultCache()
        cache.put("k", sample_test)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("k") is None

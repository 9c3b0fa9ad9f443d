# File: tests/test_cache.py

import re

from fundiflow.services.cache import (
    SimpleCache,
    create_cache_key,
    invalidate_cache,
    with_cache,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = SimpleCache(max_size=10, clock=clock)
    cache.set("a", 1, ttl_seconds=60)

    clock.now += 60
    assert cache.get("a") == 1

    clock.now += 1
    assert cache.get("a") is None
    assert not cache.has("a")
    assert cache.stats()["size"] == 0


def test_lru_eviction_prefers_least_recently_read():
    cache = SimpleCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")          # "b" is now the oldest
    cache.set("c", 3)

    assert cache.keys() == ["a", "c"]
    assert cache.get("b") is None


def test_overwrite_at_capacity_does_not_evict():
    cache = SimpleCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)

    assert sorted(cache.keys()) == ["a", "b"]
    assert cache.get("a") == 10


def test_stats_track_hits_and_misses():
    cache = SimpleCache(max_size=5)
    assert cache.stats()["hit_rate"] == "0%"

    cache.set("a", 1)
    cache.get("a")
    cache.get("a")
    cache.get("missing")

    stats = cache.stats()
    assert stats["hit_count"] == 2
    assert stats["miss_count"] == 1
    assert stats["hit_rate"] == "66.67%"
    assert stats["keys"] == ["a"]
    assert stats["max_size"] == 5

    cache.clear()
    assert cache.stats()["hit_count"] == 0


def test_cleanup_removes_only_expired():
    clock = FakeClock()
    cache = SimpleCache(clock=clock)
    cache.set("short", 1, ttl_seconds=10)
    cache.set("long", 2, ttl_seconds=100)

    clock.now += 50
    assert cache.cleanup() == 1
    assert cache.keys() == ["long"]


def test_delete_reports_whether_key_existed():
    cache = SimpleCache()
    cache.set("a", 1)
    assert cache.delete("a") is True
    assert cache.delete("a") is False


def test_create_cache_key_sorts_params():
    assert create_cache_key("projects") == "projects"
    assert create_cache_key("projects", {"user_id": "u1", "b": 2}) == "projects:b:2|user_id:u1"


def test_with_cache_memoizes_and_skips_none():
    cache = SimpleCache()
    calls = []

    @with_cache(lambda x: f"double:{x}", ttl=60, cache=cache)
    def double(x):
        calls.append(x)
        return None if x < 0 else x * 2

    assert double(2) == 4
    assert double(2) == 4
    assert calls == [2]

    assert double(-1) is None
    assert double(-1) is None
    assert calls == [2, -1, -1]


def test_with_cache_hands_out_copies():
    cache = SimpleCache()

    @with_cache(lambda: "names", ttl=60, cache=cache)
    def names():
        return [{"name": "Alice"}]

    first = names()
    first.append({"name": "Mallory"})
    first[0]["name"] = "Changed"

    assert names() == [{"name": "Alice"}]
    assert cache.get("names") == [{"name": "Alice"}]


def test_invalidate_cache_by_substring_and_regex():
    cache = SimpleCache()
    for key in ("projects:owner_id:a", "projects:owner_id:b", "workers:owner_id:a"):
        cache.set(key, 1)

    assert invalidate_cache("projects:", cache=cache) == 2
    assert cache.keys() == ["workers:owner_id:a"]

    assert invalidate_cache(re.compile(r"^workers"), cache=cache) == 1
    assert cache.keys() == []

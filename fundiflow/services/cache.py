# fundiflow/services/cache.py
"""
Simple in-memory cache for frequently read data.

A single bounded map with per-entry TTL and least-recently-used eviction.
Used to avoid re-running identical store queries within a short window.
"""

import copy
import functools
import logging
import re
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, NamedTuple, Optional, Pattern, Union

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: Any
    stored_at: float
    ttl: float


class SimpleCache:
    def __init__(self, max_size: int = 100, clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()
        self.hit_count = 0
        self.miss_count = 0

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.stored_at > entry.ttl

    def set(self, key: str, value: Any, ttl_seconds: float = 5 * 60) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("[CACHE] Evicted %s", evicted)
            self._entries[key] = _Entry(value, self._clock(), ttl_seconds)
            self._entries.move_to_end(key)

    def get(self, key: str) -> Any:
        """Return the cached value, or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.miss_count += 1
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                self.miss_count += 1
                return None
            self._entries.move_to_end(key)
            self.hit_count += 1
            return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hit_count = 0
            self.miss_count = 0

    def cleanup(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if self._expired(e, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info("[CACHE] Cleaned up %d expired entries", len(expired))
        return len(expired)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.hit_count + self.miss_count
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hit_count": self.hit_count,
                "miss_count": self.miss_count,
                "hit_rate": f"{self.hit_count / total * 100:.2f}%" if total else "0%",
                "keys": list(self._entries.keys()),
            }


app_cache = SimpleCache(200)


class CACHE_KEYS:
    PROJECTS = "projects"
    WORKERS = "workers"
    DASHBOARD_STATS = "dashboard_stats"
    REPORT_DATA = "report_data"
    USER_PROFILE = "user_profile"
    PROJECT_DETAILS = "project_details"
    WORKER_DETAILS = "worker_details"
    RECENT_ACTIVITIES = "recent_activities"


class CACHE_TTL:
    SHORT = 2 * 60
    MEDIUM = 5 * 60
    LONG = 15 * 60
    VERY_LONG = 60 * 60


def create_cache_key(base: str, params: Optional[Dict[str, Any]] = None) -> str:
    """
    Build a cache key from a base name and parameters.

    create_cache_key("projects", {"user_id": "u1", "b": 2}) -> "projects:b:2|user_id:u1"
    """
    if not params:
        return base
    param_string = "|".join(f"{k}:{v}" for k, v in sorted(params.items()))
    return f"{base}:{param_string}"


def with_cache(
    key_func: Callable[..., str],
    ttl: float = CACHE_TTL.MEDIUM,
    cache: Optional[SimpleCache] = None,
):
    """
    Decorator caching a function's return value under ``key_func(*args, **kwargs)``.

    Results of None are not distinguishable from misses and are recomputed.
    Exceptions propagate and are never cached. Callers receive a deep copy,
    so mutating a result never alters the cached entry.
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            store = cache or app_cache
            key = key_func(*args, **kwargs)
            cached = store.get(key)
            if cached is not None:
                return copy.deepcopy(cached)
            result = fn(*args, **kwargs)
            store.set(key, result, ttl)
            return copy.deepcopy(result)

        wrapper.cache_key = key_func
        return wrapper

    return decorator


def invalidate_cache(
    pattern: Union[str, Pattern[str]],
    cache: Optional[SimpleCache] = None,
) -> int:
    """Delete every key containing ``pattern`` (str) or matching it (regex)."""
    store = cache or app_cache
    if isinstance(pattern, str):
        doomed = [k for k in store.keys() if pattern in k]
    else:
        doomed = [k for k in store.keys() if re.search(pattern, k)]
    for key in doomed:
        store.delete(key)
    return len(doomed)

import logging
import threading
from staking_analytics.analytics.aggregator import now_ms

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000


class CacheEntry:

    def __init__(self, data, timestamp):
        self.data = data
        self.timestamp = timestamp

    def is_fresh(self, now, ttl_ms):
        return now - self.timestamp < ttl_ms


class TTLCache:
    """Read-through cache keyed by address.

    Entries are never evicted, only overwritten when a lookup finds them
    stale. A failed refresh leaves the previous entry in place and the
    exception reaches the caller; stale data is never served instead.

    The check-then-refresh sequence holds a per-key lock, so concurrent
    lookups of one stale key run a single refresh.
    """

    def __init__(self, ttl_ms=DEFAULT_TTL_MS, clock=None, metrics=None):
        self.ttl_ms = ttl_ms
        self.clock = clock or now_ms
        self.metrics = metrics
        self.entries = {}
        self.hits = 0
        self.misses = 0
        self._locks = {}
        self._locks_guard = threading.Lock()

    def _key_lock(self, key):
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get_or_refresh(self, key, refresh, now=None):
        with self._key_lock(key):
            if now is None:
                now = self.clock()

            entry = self.entries.get(key)
            if entry is not None and entry.is_fresh(now, self.ttl_ms):
                with self._locks_guard:
                    self.hits += 1
                if self.metrics:
                    self.metrics.record_cache_hit()
                logger.debug(f"Cache hit for {key} (age {now - entry.timestamp}ms)")
                return entry.data

            with self._locks_guard:
                self.misses += 1
            if self.metrics:
                self.metrics.record_cache_miss()
            logger.debug(f"Cache {'stale' if entry else 'miss'} for {key}, refreshing")

            try:
                data = refresh()
            except Exception:
                if self.metrics:
                    self.metrics.record_cache_refresh('error')
                raise

            self.entries[key] = CacheEntry(data, now)
            if self.metrics:
                self.metrics.record_cache_refresh('ok')
                self.metrics.set_cached_entries(len(self.entries))
            return data

    def get(self, key):
        entry = self.entries.get(key)
        return entry.data if entry else None

    def invalidate(self, key):
        with self._key_lock(key):
            self.entries.pop(key, None)

    def clear(self):
        # Key locks are kept so an in-flight refresh finishes before its entry is dropped
        with self._locks_guard:
            keys = list(self._locks)
        for key in keys:
            with self._key_lock(key):
                self.entries.pop(key, None)
        if self.metrics:
            self.metrics.set_cached_entries(len(self.entries))

    def get_stats(self):
        return {
            'entries': len(self.entries),
            'hits': self.hits,
            'misses': self.misses,
            'ttl_ms': self.ttl_ms
        }

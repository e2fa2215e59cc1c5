"""In-memory freshness cache for fetched resources.

One slot per resource key, judged stale purely by age. The clock and TTL are
injected so tests can move time without sleeping.

Endpoints run in a threadpool, so each key has its own lock:
``get_or_fetch`` holds it across the upstream fetch and concurrent misses for
the same key collapse into a single fetch.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Hashable, Optional

from avalanchewatch.cache.models import RESOURCE_KEYS, CacheEntry
from avalanchewatch.config import CACHE_TTL_HOURS

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class FreshnessCache:
    """Keyed store of last-fetched payloads with a fixed time-to-live.

    Attributes:
        ttl: Maximum age of a fresh entry
        clock: Callable returning the current UTC datetime

    Example:
        >>> cache = FreshnessCache()
        >>> payload = cache.get("avalanche")
        >>> if payload is None:
        ...     payload = fetch_bulletin()
        ...     cache.put("avalanche", payload)
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=CACHE_TTL_HOURS),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def get(self, key: str, variant: Optional[Hashable] = None) -> Optional[Any]:
        """Get cached payload if fresh.

        Args:
            key: Resource key
            variant: Request parameters the payload must match

        Returns:
            Payload on a hit, None otherwise
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache MISS for {key} (empty)")
            return None
        if entry.variant != variant:
            logger.debug(f"Cache MISS for {key} (variant {variant} != {entry.variant})")
            return None
        if not entry.is_fresh(self.clock(), self.ttl):
            logger.debug(f"Cache MISS for {key} (stale since {entry.fetched_at + self.ttl})")
            return None

        logger.debug(f"Cache HIT for {key} (fetched_at={entry.fetched_at})")
        return entry.payload

    def put(self, key: str, payload: Any, variant: Optional[Hashable] = None) -> CacheEntry:
        """Store payload, replacing any previous entry for the key."""
        entry = CacheEntry(payload=payload, fetched_at=self.clock(), variant=variant)
        self._entries[key] = entry
        logger.info(f"Cached {key} at {entry.fetched_at.isoformat()}")
        return entry

    def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Any],
        variant: Optional[Hashable] = None,
    ) -> Any:
        """Return the fresh payload for key, fetching and storing it on a miss.

        Exceptions raised by fetch propagate and leave the cache untouched.
        """
        payload = self.get(key, variant)
        if payload is not None:
            return payload

        with self._lock_for(key):
            # Another request may have filled the slot while we waited
            payload = self.get(key, variant)
            if payload is not None:
                return payload

            payload = fetch()
            self.put(key, payload, variant)
            return payload

    def entry(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def fetched_at(self, key: str) -> Optional[datetime]:
        """When key was last stored, or None if never populated."""
        entry = self._entries.get(key)
        return entry.fetched_at if entry is not None else None

    def status(self) -> dict[str, Optional[datetime]]:
        """Last fetch time for every known resource key."""
        keys = list(RESOURCE_KEYS) + [k for k in self._entries if k not in RESOURCE_KEYS]
        return {key: self.fetched_at(key) for key in keys}

    def clear(self) -> None:
        self._entries.clear()

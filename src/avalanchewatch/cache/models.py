"""Data models for cache layer."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Hashable, Optional

# Resource keys
AVALANCHE = "avalanche"
WARNINGS = "warnings"
FORECAST = "forecast"

RESOURCE_KEYS = (AVALANCHE, WARNINGS, FORECAST)


@dataclass(frozen=True)
class CacheEntry:
    """Last fetched payload for one resource.

    Entries are replaced wholesale, never mutated.

    Attributes:
        payload: Cached resource
        fetched_at: When the payload was stored (UTC)
        variant: Request parameters the payload was built for (e.g. forecast
            coordinates); a lookup with another variant is a miss
    """

    payload: Any
    fetched_at: datetime
    variant: Optional[Hashable] = None

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) < ttl

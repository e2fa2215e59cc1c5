"""In-memory caching layer for avalanchewatch.

Resources are kept for a fixed time-to-live (6 hours by default) and are lost
on restart.
"""

from avalanchewatch.cache.freshness import FreshnessCache, utcnow
from avalanchewatch.cache.models import (
    AVALANCHE,
    FORECAST,
    RESOURCE_KEYS,
    WARNINGS,
    CacheEntry,
)

__all__ = [
    "AVALANCHE",
    "FORECAST",
    "RESOURCE_KEYS",
    "WARNINGS",
    "CacheEntry",
    "FreshnessCache",
    "utcnow",
]

"""Extended forecast service.

Unlike the bulletin and warnings, the forecast has no synthetic fallback:
an upstream failure raises ForecastUnavailableError and nothing is cached.
"""

import logging
from typing import Optional

from avalanchewatch.api.schemas import ForecastResource
from avalanchewatch.cache import FORECAST, FreshnessCache
from avalanchewatch.config import Settings
from avalanchewatch.errors import ForecastUnavailableError, SourceError
from avalanchewatch.sources import OpenMeteoForecastSource

logger = logging.getLogger(__name__)

COORDINATE_DECIMALS = 4


class ForecastService:
    """Multi-day forecast for a point, cached per (lat, lon, days).

    The cache holds a single forecast slot: asking for other coordinates or
    another day count is a miss and replaces the slot once fetched.
    """

    def __init__(self, settings: Settings, cache: FreshnessCache):
        self.settings = settings
        self.cache = cache

    def clamp_days(self, days: Optional[int]) -> int:
        """Requested day count bounded to 1..max_forecast_days."""
        if days is None:
            days = self.settings.default_forecast_days
        return max(1, min(int(days), self.settings.max_forecast_days))

    def get(
        self,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        days: Optional[int] = None,
    ) -> ForecastResource:
        """Get forecast, fetching on a cache miss.

        Args:
            lat: Latitude (defaults to the region)
            lon: Longitude (defaults to the region)
            days: Forecast days, clamped to 1..16

        Returns:
            ForecastResource

        Raises:
            ForecastUnavailableError: If the forecast cannot be fetched or parsed
        """
        region = self.settings.region
        # Coordinates finer than 4 decimals (~10 m) share a slot
        lat = round(region.latitude if lat is None else lat, COORDINATE_DECIMALS)
        lon = round(region.longitude if lon is None else lon, COORDINATE_DECIMALS)
        days = self.clamp_days(days)
        variant = (lat, lon, days)

        def fetch() -> ForecastResource:
            logger.info(f"Fetching {days}-day forecast for ({lat}, {lon})")
            source = OpenMeteoForecastSource(
                self.settings, lat=lat, lon=lon, days=days, clock=self.cache.clock
            )
            try:
                return source.run()
            except SourceError as e:
                logger.error(f"Extended forecast failed: {e}")
                raise ForecastUnavailableError(e.message, source=e.source or source.url) from e

        return self.cache.get_or_fetch(FORECAST, fetch, variant)

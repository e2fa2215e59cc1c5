"""Weather warnings acquisition: cache, vigilance page, then empty fallback."""

import logging
from typing import Optional, Sequence

from avalanchewatch.api.schemas import WarningsResource
from avalanchewatch.cache import WARNINGS, FreshnessCache
from avalanchewatch.config import Settings
from avalanchewatch.pipeline.avalanche import run_sources
from avalanchewatch.pipeline.fallback import build_fallback_warnings
from avalanchewatch.sources import BaseSource, VigilanceWarningsSource

logger = logging.getLogger(__name__)


class WarningsPipeline:
    """Produces weather warnings for the configured department.

    Never raises: if the vigilance page cannot be used, a resource with no
    alerts and ``is_mock_data`` set is returned (and cached).
    """

    def __init__(
        self,
        settings: Settings,
        cache: FreshnessCache,
        sources: Optional[Sequence[BaseSource]] = None,
    ):
        self.settings = settings
        self.cache = cache
        if sources is None:
            sources = [VigilanceWarningsSource(settings, clock=cache.clock)]
        self.sources = list(sources)

    def get(self) -> WarningsResource:
        return self.cache.get_or_fetch(WARNINGS, self.acquire)

    def acquire(self) -> WarningsResource:
        logger.info(f"Fetching weather warnings for {self.settings.region.department}")
        warnings, errors = run_sources(self.sources, "warnings")
        if warnings is not None:
            return warnings

        logger.warning("Weather warnings unavailable, returning empty alerts")
        return build_fallback_warnings(
            self.settings.region,
            error="; ".join(errors) or None,
            now=self.cache.clock(),
        )

"""Avalanche bulletin acquisition.

Sources are tried in order until one produces a bulletin:

1. Cached bulletin, if fresher than the TTL
2. Structured bulletin document
3. Heuristic scraping of the avalanche page
4. Synthesised fallback bulletin (always succeeds)

Whatever is produced, fallback included, is cached so repeated upstream
failures are not retried within the TTL window.
"""

import logging
from typing import Optional, Sequence

from avalanchewatch.api.schemas import Bulletin
from avalanchewatch.cache import AVALANCHE, FreshnessCache
from avalanchewatch.config import Settings
from avalanchewatch.errors import SourceError
from avalanchewatch.pipeline.fallback import build_fallback_bulletin
from avalanchewatch.sources import BaseSource, HeuristicPageSource, StructuredBulletinSource

logger = logging.getLogger(__name__)


def run_sources(sources: Sequence[BaseSource], resource: str) -> tuple[Optional[object], list[str]]:
    """Run sources in order and return the first result.

    Args:
        sources: Sources to try
        resource: Resource name for log messages

    Returns:
        Tuple of (first successful result or None, per-source error messages)
    """
    errors = []
    for source in sources:
        try:
            result = source.run()
        except SourceError as e:
            logger.warning(f"{resource}: {source.label} failed, falling through: {e}")
            errors.append(f"{source.label}: {e}")
            continue
        except Exception as e:
            # Parser bug on unexpected markup
            logger.error(f"{resource}: {source.label} raised {type(e).__name__}: {e}")
            errors.append(f"{source.label}: {type(e).__name__}: {e}")
            continue

        logger.info(f"{resource}: using {source.label}")
        return result, errors

    return None, errors


class AvalanchePipeline:
    """Produces the avalanche bulletin for the configured massif.

    Attributes:
        settings: Service settings
        cache: Shared freshness cache
        sources: Ordered sources (structured then heuristic by default)

    Example:
        >>> pipeline = AvalanchePipeline(load_settings(), FreshnessCache())
        >>> bulletin = pipeline.get()  # never raises
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
            sources = [
                StructuredBulletinSource(settings, clock=cache.clock),
                HeuristicPageSource(settings, clock=cache.clock),
            ]
        self.sources = list(sources)

    def get(self) -> Bulletin:
        """Cached bulletin if fresh, otherwise a newly acquired one."""
        return self.cache.get_or_fetch(AVALANCHE, self.acquire)

    def acquire(self) -> Bulletin:
        """Run the source chain, falling back to a synthesised bulletin."""
        logger.info(f"Fetching fresh avalanche bulletin for {self.settings.region.massif}")
        bulletin, errors = run_sources(self.sources, "avalanche")
        if bulletin is not None:
            return bulletin

        logger.warning("All avalanche sources failed, using fallback bulletin")
        error = "Using mock data - scraping temporarily unavailable"
        if errors:
            error = f"{error} ({'; '.join(errors)})"
        return build_fallback_bulletin(self.settings.region, error=error, now=self.cache.clock())

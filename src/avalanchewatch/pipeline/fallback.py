"""Synthesised resources used when no upstream source is usable."""

from datetime import datetime, timedelta
from typing import Optional

from avalanchewatch.api.schemas import Bulletin, Provenance, WarningsResource
from avalanchewatch.cache.freshness import utcnow
from avalanchewatch.config import RegionConfig
from avalanchewatch.risk import (
    DEFAULT_LEVEL,
    elevation_bands_for_level,
    problems_for,
    snowpack_for,
    summary_for,
    tendency_for,
    weather_for,
)

FALLBACK_DATA_SOURCE = "Mock Data (Scraping Failed)"
FALLBACK_NOTE = (
    "Live bulletin unavailable; content derived from the default considerable (3) risk level."
)


def build_fallback_bulletin(
    region: RegionConfig,
    error: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Bulletin:
    """Bulletin built from the risk-rule engine at the default level.

    Args:
        region: Region the bulletin is for
        error: Diagnostic describing why live data is missing
        now: Generation time (defaults to current UTC time)

    Returns:
        Bulletin with provenance 'fallback' and is_mock_data set
    """
    now = now or utcnow()
    level = DEFAULT_LEVEL
    return Bulletin(
        massif=region.massif,
        update_time=now,
        valid_until=(now + timedelta(days=1)).strftime("%d/%m/%Y"),
        overall_risk=level,
        summary=summary_for(level),
        elevation_bands=elevation_bands_for_level(level),
        problems=problems_for(level),
        snowpack=snowpack_for(level),
        weather=weather_for(level),
        tendency=tendency_for(level),
        source=region.avalanche_page_url,
        data_source=FALLBACK_DATA_SOURCE,
        provenance=Provenance.FALLBACK,
        is_mock_data=True,
        error=error,
        note=FALLBACK_NOTE,
    )


def build_fallback_warnings(
    region: RegionConfig,
    error: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WarningsResource:
    """Warnings resource with no alerts, flagged as mock data."""
    return WarningsResource(
        department=region.department,
        update_time=now or utcnow(),
        alerts=[],
        source=region.warnings_url,
        is_mock_data=True,
        error=error,
    )

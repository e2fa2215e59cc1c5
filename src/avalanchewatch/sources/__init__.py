"""Upstream data sources for avalanchewatch.

- StructuredBulletinSource: machine-readable avalanche bulletin (XML)
- HeuristicPageSource: risk keyword scraping from the avalanche web page
- VigilanceWarningsSource: department weather warnings
- OpenMeteoForecastSource: multi-day point forecast
"""

from avalanchewatch.sources.base import BaseSource
from avalanchewatch.sources.heuristic import HeuristicPageSource, scan_risk_level
from avalanchewatch.sources.http import fetch_document
from avalanchewatch.sources.openmeteo import OpenMeteoForecastSource
from avalanchewatch.sources.structured import StructuredBulletinSource
from avalanchewatch.sources.warnings import VigilanceWarningsSource, level_number

__all__ = [
    "BaseSource",
    "HeuristicPageSource",
    "OpenMeteoForecastSource",
    "StructuredBulletinSource",
    "VigilanceWarningsSource",
    "fetch_document",
    "level_number",
    "scan_risk_level",
]

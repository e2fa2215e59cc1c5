"""Heuristic avalanche risk scraping from the Météo-France web page.

Only a single scalar is recovered from the page: the danger level, found by
keyword search. Everything else in the bulletin is derived from that level,
so these bulletins are a lower-confidence tier than the structured source.
"""

import logging
from datetime import timedelta
from typing import Optional

from bs4 import BeautifulSoup

from avalanchewatch.api.schemas import Bulletin, Provenance
from avalanchewatch.errors import SourceParseError
from avalanchewatch.risk import (
    DEFAULT_LEVEL,
    elevation_bands_for_level,
    problems_for,
    snowpack_for,
    summary_for,
    tendency_for,
    translate_text,
    weather_for,
)
from avalanchewatch.sources.base import BaseSource

logger = logging.getLogger(__name__)

RISK_SELECTORS = '.risk-level, .risque, [class*="risque"]'
SUMMARY_SELECTORS = '.resume, .synthesis, [class*="resume"]'

# Checked in order, most severe first; first match wins
RISK_KEYWORDS = [
    (4, ("4", "fort")),
    (3, ("3", "marqué")),
    (2, ("2", "limité")),
    (1, ("1", "faible")),
]


def scan_risk_level(text: str, default: int = DEFAULT_LEVEL) -> int:
    """Danger level from free text by keyword search.

    Args:
        text: Text to scan (case-insensitive)
        default: Level when no keyword matches

    Returns:
        Level 1-4, or default
    """
    lowered = text.lower()
    for level, keywords in RISK_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return level
    return default


def _select_text(soup: BeautifulSoup, selectors: str) -> str:
    return " ".join(element.get_text(" ", strip=True) for element in soup.select(selectors))


class HeuristicPageSource(BaseSource[Bulletin]):
    """Avalanche bulletin synthesised from the scraped risk level."""

    label = "Météo-France Web Scraping"

    @property
    def url(self) -> str:
        return self.settings.region.avalanche_page_url

    def parse(self, document: bytes) -> Bulletin:
        """Scan the page for a risk keyword and build a Bulletin around it.

        Raises:
            SourceParseError: If the page is empty
        """
        if not document or not document.strip():
            raise SourceParseError("Empty avalanche page", source=self.url)

        soup = BeautifulSoup(document, "html.parser", from_encoding="utf-8")
        risk_text = _select_text(soup, RISK_SELECTORS)
        level = scan_risk_level(risk_text)
        logger.info(f"Heuristic risk level {level} from {len(risk_text)} chars of page text")

        return Bulletin(
            massif=self.settings.region.massif,
            update_time=self.clock(),
            valid_until=(self.clock() + timedelta(days=1)).strftime("%d/%m/%Y"),
            overall_risk=level,
            summary=summary_for(level),
            elevation_bands=elevation_bands_for_level(level),
            problems=problems_for(level),
            snowpack=snowpack_for(level),
            weather=weather_for(level),
            tendency=tendency_for(level),
            source=self.url,
            data_source=self.label,
            provenance=Provenance.HEURISTIC,
            note=self._scraped_excerpt(soup),
        )

    def _scraped_excerpt(self, soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(SUMMARY_SELECTORS)
        if element is None:
            return None
        text = element.get_text(" ", strip=True)
        return translate_text(text) if text else None

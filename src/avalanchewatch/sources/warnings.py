"""Weather warnings scraped from the Météo-France vigilance page."""

import logging

from bs4 import BeautifulSoup

from avalanchewatch.api.schemas import Alert, WarningsResource
from avalanchewatch.errors import SourceParseError
from avalanchewatch.sources.base import BaseSource

logger = logging.getLogger(__name__)

ALERT_SELECTORS = '.alert, .vigilance-item, [class*="vigilance"]'
TITLE_SELECTORS = ".title, h3, h4"
DESCRIPTION_SELECTORS = ".description, p"

DEFAULT_LEVEL = "orange"
DEFAULT_HAZARD = "avalanche"
DEFAULT_DESCRIPTION = "Check Météo-France for details"

# Vigilance colours (English and French) to numeric severity
LEVEL_NUMBERS = {
    "green": 1,
    "vert": 1,
    "yellow": 2,
    "jaune": 2,
    "orange": 3,
    "red": 4,
    "rouge": 4,
}


def level_number(level: str) -> int:
    """Numeric severity for a vigilance colour; unknown colours count as orange."""
    return LEVEL_NUMBERS.get(level.strip().lower(), LEVEL_NUMBERS[DEFAULT_LEVEL])


class VigilanceWarningsSource(BaseSource[WarningsResource]):
    """Department weather warnings from the vigilance page."""

    label = "Météo-France Vigilance"

    @property
    def url(self) -> str:
        return self.settings.region.warnings_url

    def parse(self, document: bytes) -> WarningsResource:
        """Extract alert blocks from the vigilance page.

        Blocks without a title are skipped, as are blocks wrapping other alert
        blocks; an alert title is reported once.

        Raises:
            SourceParseError: If the page is empty
        """
        if not document or not document.strip():
            raise SourceParseError("Empty vigilance page", source=self.url)

        soup = BeautifulSoup(document, "html.parser", from_encoding="utf-8")
        alerts = []
        seen_titles = set()

        for element in soup.select(ALERT_SELECTORS):
            # Containers of other alert blocks
            if element.select_one(ALERT_SELECTORS) is not None:
                continue

            title_element = element.select_one(TITLE_SELECTORS)
            title = title_element.get_text(" ", strip=True) if title_element else ""
            if not title or title in seen_titles:
                continue
            seen_titles.add(title)

            level = (element.get("data-level") or DEFAULT_LEVEL).strip().lower()
            description_element = element.select_one(DESCRIPTION_SELECTORS)
            description = (
                description_element.get_text(" ", strip=True) if description_element else ""
            )

            alerts.append(
                Alert(
                    type=(element.get("data-type") or DEFAULT_HAZARD).strip().lower(),
                    level=level,
                    level_number=level_number(level),
                    title=title,
                    description=description or DEFAULT_DESCRIPTION,
                )
            )

        logger.info(f"Found {len(alerts)} vigilance alerts for {self.settings.region.department}")

        return WarningsResource(
            department=self.settings.region.department,
            update_time=self.clock(),
            alerts=alerts,
            source=self.url,
        )

"""Structured avalanche bulletin (BRA) parser.

Météo-France publishes a machine-readable bulletin per massif. The parts used
here are:

- ``RISQUE`` element with ``LOC1`` (high-altitude risk) and ``LOC2``
  (low-altitude risk) attributes
- ``DateValidite``, ``RisqueComment`` and ``TendanceComment`` texts
- ``TypeAvalanche`` problem tokens (e.g. ``neige_ventee``)
- Snowpack texts ``NeigeFraiche24h``, ``Enneigement``, ``QualiteNeige``
- Weather texts ``PrevisionMeteo``, ``Temperature``, ``Vent``

Any of the texts may be missing; the risk-rule engine fills the gaps.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from avalanchewatch.api.schemas import (
    AvalancheProblem,
    Bulletin,
    Provenance,
    Snowpack,
    WeatherNarrative,
)
from avalanchewatch.errors import SourceParseError
from avalanchewatch.risk import (
    elevation_bands_for,
    overall_risk,
    problem_icon,
    problems_for,
    snowpack_for,
    summary_for,
    tendency_for,
    translate_problem_type,
    weather_for,
)
from avalanchewatch.sources.base import BaseSource

logger = logging.getLogger(__name__)

DEFAULT_HIGH_RISK = 3
DEFAULT_LOW_RISK = 2


def _find_text(root: ET.Element, tag: str) -> Optional[str]:
    """Stripped text of the first element named tag, or None if empty/absent."""
    for element in root.iter(tag):
        text = (element.text or "").strip()
        if text:
            return text
    return None


def _zone_risk(risque: ET.Element, attribute: str, default: int, url: str) -> int:
    raw = risque.get(attribute)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise SourceParseError(
            f"RISQUE {attribute}={raw!r} is not an integer", source=url
        ) from None


class StructuredBulletinSource(BaseSource[Bulletin]):
    """Avalanche bulletin from the structured BRA document.

    Example:
        >>> source = StructuredBulletinSource(load_settings())
        >>> bulletin = source.run()
        >>> bulletin.provenance
        <Provenance.STRUCTURED: 'structured'>
    """

    label = "Météo-France XML"

    @property
    def url(self) -> str:
        return self.settings.region.bulletin_url

    def parse(self, document: bytes) -> Bulletin:
        """Parse a BRA document into a Bulletin.

        Args:
            document: Raw XML

        Returns:
            Bulletin with provenance 'structured'

        Raises:
            SourceParseError: If the XML is malformed, has no RISQUE element
                or carries non-integer zone risks
        """
        try:
            root = ET.fromstring(document)
        except ET.ParseError as e:
            raise SourceParseError(f"Malformed bulletin XML: {e}", source=self.url) from e

        risque = next(root.iter("RISQUE"), None)
        if risque is None:
            raise SourceParseError("Bulletin has no RISQUE element", source=self.url)

        high = _zone_risk(risque, "LOC1", DEFAULT_HIGH_RISK, self.url)
        low = _zone_risk(risque, "LOC2", DEFAULT_LOW_RISK, self.url)
        overall = overall_risk(high, low)
        logger.info(f"Structured bulletin: high={high}, low={low}, overall={overall}")

        problems = self._parse_problems(root, overall) or problems_for(overall)

        engine_snowpack = snowpack_for(overall)
        engine_weather = weather_for(overall)
        region = self.settings.region

        return Bulletin(
            massif=region.massif,
            update_time=self.clock(),
            valid_until=_find_text(root, "DateValidite") or self.clock().isoformat(),
            overall_risk=overall,
            summary=_find_text(root, "RisqueComment") or summary_for(overall),
            elevation_bands=elevation_bands_for(high, low),
            problems=problems,
            snowpack=Snowpack(
                recent_snow=_find_text(root, "NeigeFraiche24h") or engine_snowpack.recent_snow,
                total_depth=_find_text(root, "Enneigement") or engine_snowpack.total_depth,
                quality=_find_text(root, "QualiteNeige") or engine_snowpack.quality,
            ),
            weather=WeatherNarrative(
                forecast=_find_text(root, "PrevisionMeteo") or engine_weather.forecast,
                temperature=_find_text(root, "Temperature") or engine_weather.temperature,
                wind=_find_text(root, "Vent") or engine_weather.wind,
            ),
            tendency=_find_text(root, "TendanceComment") or tendency_for(overall),
            source=region.avalanche_page_url,
            data_source=self.label,
            provenance=Provenance.STRUCTURED,
        )

    def _parse_problems(self, root: ET.Element, overall: int) -> list[AvalancheProblem]:
        """Problems listed explicitly in the bulletin, in document order."""
        problems = []
        for element in root.iter("TypeAvalanche"):
            token = (element.text or "").strip()
            if not token:
                continue
            problems.append(
                AvalancheProblem(
                    type=translate_problem_type(token),
                    severity="High" if overall >= 3 else "Moderate",
                    distribution="Widespread" if overall >= 4 else "Specific areas",
                    sensitivity="High - easily triggered" if overall >= 3 else "Moderate",
                    icon=problem_icon(token),
                )
            )
        return problems

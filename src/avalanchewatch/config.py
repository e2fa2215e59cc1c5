"""Runtime configuration for the avalanche API.

Region identity (massif, department, coordinates) and upstream settings are
plain dataclasses. Defaults target the Vanoise massif in Savoie; every value
can be overridden through ``AVALANCHEWATCH_*`` environment variables.

Example:
    >>> settings = load_settings({"AVALANCHEWATCH_MASSIF": "Beaufortain"})
    >>> settings.region.massif_slug
    'beaufortain'
"""

import os
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Mapping, Optional

ENV_PREFIX = "AVALANCHEWATCH_"

# Cache validity in hours (bulletins are published once a day)
CACHE_TTL_HOURS = 6

# Per-request timeout in seconds for upstream calls
REQUEST_TIMEOUT = 10

DEFAULT_FORECAST_DAYS = 7
MAX_FORECAST_DAYS = 16

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

BULLETIN_URL_TEMPLATE = (
    "https://donneespubliques.meteofrance.fr/donnees_libres/Pdf/BRA/BRA.{massif}.xml"
)
AVALANCHE_PAGE_URL = "https://meteofrance.com/meteo-montagne/alpes-du-nord/risques-avalanche"
WARNINGS_URL_TEMPLATE = "https://vigilance.meteofrance.fr/fr/{department}"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


def slugify(value: str) -> str:
    """Lower-case, accent-free, hyphenated form of a name."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode()
    return re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")


@dataclass
class RegionConfig:
    """Identity of the single region served by the API.

    Attributes:
        massif: Massif name used as the bulletin key
        department: Department for weather warnings
        latitude: Default forecast latitude
        longitude: Default forecast longitude
        timezone: Timezone for forecast day boundaries
        bulletin_url: Structured bulletin document (derived from massif if None)
        avalanche_page_url: HTML page scraped when the bulletin is unavailable
        warnings_url: Vigilance page (derived from department if None)
    """

    massif: str = "Vanoise"
    department: str = "Savoie"
    latitude: float = 45.3967
    longitude: float = 6.5656
    timezone: str = "Europe/Paris"
    bulletin_url: Optional[str] = None
    avalanche_page_url: str = AVALANCHE_PAGE_URL
    warnings_url: Optional[str] = None

    def __post_init__(self):
        if self.bulletin_url is None:
            self.bulletin_url = BULLETIN_URL_TEMPLATE.format(
                massif=slugify(self.massif).replace("-", "_").upper()
            )
        if self.warnings_url is None:
            self.warnings_url = WARNINGS_URL_TEMPLATE.format(department=self.department_slug)

    @property
    def massif_slug(self) -> str:
        return slugify(self.massif)

    @property
    def department_slug(self) -> str:
        return slugify(self.department)


@dataclass
class Settings:
    """Service settings.

    Attributes:
        region: Region served
        cache_ttl_hours: Freshness window for cached resources
        request_timeout: Timeout in seconds per upstream request
        user_agent: User-Agent header sent upstream
        forecast_url: Open-Meteo forecast endpoint
        default_forecast_days: Days returned when not requested
        max_forecast_days: Upper bound for requested days
    """

    region: RegionConfig = field(default_factory=RegionConfig)
    cache_ttl_hours: float = CACHE_TTL_HOURS
    request_timeout: float = REQUEST_TIMEOUT
    user_agent: str = USER_AGENT
    forecast_url: str = FORECAST_URL
    default_forecast_days: int = DEFAULT_FORECAST_DAYS
    max_forecast_days: int = MAX_FORECAST_DAYS


def _number(environ: Mapping[str, str], name: str, default: float, cast=float):
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings with overrides applied

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    if environ is None:
        environ = os.environ

    def text(name: str) -> Optional[str]:
        return environ.get(ENV_PREFIX + name) or None

    region_defaults = RegionConfig()
    region = RegionConfig(
        massif=text("MASSIF") or region_defaults.massif,
        department=text("DEPARTMENT") or region_defaults.department,
        latitude=_number(environ, "LATITUDE", region_defaults.latitude),
        longitude=_number(environ, "LONGITUDE", region_defaults.longitude),
        timezone=text("TIMEZONE") or region_defaults.timezone,
        bulletin_url=text("BULLETIN_URL"),
        avalanche_page_url=text("AVALANCHE_PAGE_URL") or AVALANCHE_PAGE_URL,
        warnings_url=text("WARNINGS_URL"),
    )

    return Settings(
        region=region,
        cache_ttl_hours=_number(environ, "CACHE_TTL_HOURS", CACHE_TTL_HOURS),
        request_timeout=_number(environ, "REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        user_agent=text("USER_AGENT") or USER_AGENT,
        forecast_url=text("FORECAST_URL") or FORECAST_URL,
        default_forecast_days=_number(
            environ, "FORECAST_DAYS", DEFAULT_FORECAST_DAYS, cast=int
        ),
        max_forecast_days=MAX_FORECAST_DAYS,
    )

"""Pydantic schemas for API resources.

Defines the avalanche bulletin, weather warnings and extended forecast
payloads. Fields are snake_case in Python and serialised as camelCase.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Provenance(str, Enum):
    """Where a bulletin's risk content came from."""

    STRUCTURED = "structured"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


class ElevationBand(CamelModel):
    """Risk for one altitude stratum.

    Attributes:
        elevation: Elevation range label (e.g. 'Above 2500m')
        risk: Danger level 1-5
        aspects: Compass aspects most affected
        description: What the danger level means
    """

    elevation: str
    risk: int = Field(..., ge=1, le=5)
    aspects: list[str] = Field(default_factory=list)
    description: str


class AvalancheProblem(CamelModel):
    """A typical avalanche problem."""

    type: str
    severity: str
    distribution: str
    sensitivity: str
    icon: Optional[str] = None


class Snowpack(CamelModel):
    recent_snow: str
    total_depth: str
    quality: str


class WeatherNarrative(CamelModel):
    forecast: str
    temperature: str
    wind: str


class Bulletin(CamelModel):
    """Avalanche bulletin for a massif.

    Attributes:
        massif: Massif name
        update_time: When this bulletin was generated
        valid_until: Validity as published by the source (free text)
        overall_risk: Headline danger level 1-5
        summary: Bulletin summary
        elevation_bands: Exactly 3 bands ordered high, mid, low
        problems: Avalanche problems
        snowpack: Snowpack narrative
        weather: Weather narrative
        tendency: Trend narrative
        source: Source URL shown to users
        data_source: Human-readable data source label
        provenance: structured, heuristic or fallback
        is_mock_data: True when no live data was available
        error: Diagnostic for degraded payloads
        note: Extra information (e.g. scraped excerpt)
    """

    massif: str
    update_time: datetime
    valid_until: str
    overall_risk: int = Field(..., ge=1, le=5)
    summary: str
    elevation_bands: list[ElevationBand] = Field(..., min_length=3, max_length=3)
    problems: list[AvalancheProblem]
    snowpack: Snowpack
    weather: WeatherNarrative
    tendency: str
    source: str
    data_source: str
    provenance: Provenance
    is_mock_data: bool = False
    error: Optional[str] = None
    note: Optional[str] = None


class Alert(CamelModel):
    """A weather warning for the department.

    Attributes:
        type: Hazard type (e.g. 'avalanche', 'snow-ice')
        level: Vigilance colour label
        level_number: Numeric severity 1 (green) to 4 (red)
        title: Alert title
        description: Alert details
    """

    type: str
    level: str
    level_number: int = Field(..., ge=1, le=4)
    title: str
    description: str


class WarningsResource(CamelModel):
    department: str
    update_time: datetime
    alerts: list[Alert] = Field(default_factory=list)
    source: str
    is_mock_data: bool = False
    error: Optional[str] = None


class HourlySample(CamelModel):
    """One 3-hourly forecast sample."""

    time: str
    temperature: Optional[float] = None
    snowfall: Optional[float] = None
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_gusts: Optional[float] = None
    weather_code: Optional[int] = None


class ForecastDay(CamelModel):
    """Daily forecast with derived mountain fields.

    Attributes:
        date: Day (YYYY-MM-DD, local time)
        temp_max: Max temperature in C
        temp_min: Min temperature in C
        snowfall: Snowfall sum in cm
        precipitation: Precipitation sum in mm
        wind_speed: Max wind speed in km/h
        wind_gusts: Max gusts in km/h
        weather_code: WMO weather code
        weather_description: Text for weather_code
        freezing_level: Estimated freezing level in m
        avalanche_risk: low, moderate, considerable or high
        hourly: 3-hourly samples for the day
    """

    date: str
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None
    snowfall: Optional[float] = None
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_gusts: Optional[float] = None
    weather_code: Optional[int] = None
    weather_description: str = "Unknown"
    freezing_level: Optional[int] = None
    avalanche_risk: str = "low"
    hourly: list[HourlySample] = Field(default_factory=list)


class LocationInfo(CamelModel):
    lat: float
    lon: float


class ForecastResource(CamelModel):
    location: LocationInfo
    update_time: datetime
    days: int = Field(..., ge=1, le=16)
    forecast: list[ForecastDay]
    source: str


class CacheStatus(CamelModel):
    """Last fetch time per cached resource (None if never fetched)."""

    avalanche: Optional[str] = None
    warnings: Optional[str] = None
    forecast: Optional[str] = None


class HealthResponse(CamelModel):
    """Health check response.

    Attributes:
        status: Service status
        timestamp: Current server time (ISO-8601)
        cache: Last fetch time per resource
    """

    status: str = Field(
        default="ok",
        description="Service status",
    )
    timestamp: str
    cache: CacheStatus


class ErrorResponse(BaseModel):
    """Error response schema.

    Attributes:
        error: Error type/code
        message: Human-readable error message
        detail: Additional error details
    """

    error: str = Field(
        ...,
        description="Error type",
    )
    message: str = Field(
        ...,
        description="Error message",
    )
    detail: Optional[str] = Field(
        default=None,
        description="Additional details",
    )

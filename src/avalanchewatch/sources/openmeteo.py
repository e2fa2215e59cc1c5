"""Extended forecast from the Open-Meteo API.

Open-Meteo returns parallel arrays per field, for example:

    {"daily": {"time": ["2026-01-15", ...], "snowfall_sum": [12.3, ...]},
     "hourly": {"time": ["2026-01-15T00:00", ...], "snowfall": [0.4, ...]}}

They are reshaped into one entry per day carrying 3-hourly samples, plus
derived freezing level, avalanche-risk bucket and weather description.
"""

import json
import logging
from typing import Any, Optional

import pandas as pd

from avalanchewatch.api.schemas import (
    ForecastDay,
    ForecastResource,
    HourlySample,
    LocationInfo,
)
from avalanchewatch.errors import SourceParseError
from avalanchewatch.risk import (
    forecast_avalanche_risk,
    freezing_level,
    weather_code_description,
)
from avalanchewatch.sources.base import BaseSource

logger = logging.getLogger(__name__)

# Open-Meteo field -> ForecastDay attribute
DAILY_FIELDS = {
    "temperature_2m_max": "temp_max",
    "temperature_2m_min": "temp_min",
    "snowfall_sum": "snowfall",
    "precipitation_sum": "precipitation",
    "wind_speed_10m_max": "wind_speed",
    "wind_gusts_10m_max": "wind_gusts",
    "weather_code": "weather_code",
}

# Open-Meteo field -> HourlySample attribute
HOURLY_FIELDS = {
    "temperature_2m": "temperature",
    "snowfall": "snowfall",
    "precipitation": "precipitation",
    "wind_speed_10m": "wind_speed",
    "wind_gusts_10m": "wind_gusts",
    "weather_code": "weather_code",
}

SAMPLE_EVERY_HOURS = 3


def _float(value: Any) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return round(float(value), 1)


def _int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _frame(payload: dict, section: str, fields: dict[str, str]) -> pd.DataFrame:
    """Build a DataFrame from one section of parallel arrays.

    Raises:
        SourceParseError: If the section or its time axis is missing, or the
            arrays have different lengths
    """
    block = payload.get(section)
    if not isinstance(block, dict) or "time" not in block:
        raise SourceParseError(f"Forecast response has no {section} time axis")

    columns = {"time": block["time"]}
    for field_name, attribute in fields.items():
        columns[attribute] = block.get(field_name, [None] * len(block["time"]))

    try:
        return pd.DataFrame(columns)
    except ValueError as e:
        raise SourceParseError(f"Inconsistent {section} arrays: {e}") from e


class OpenMeteoForecastSource(BaseSource[ForecastResource]):
    """Multi-day forecast for a point.

    Attributes:
        lat: Latitude
        lon: Longitude
        days: Number of forecast days
    """

    label = "Open-Meteo"

    def __init__(self, settings, lat: float, lon: float, days: int, clock=None):
        super().__init__(settings, clock)
        self.lat = lat
        self.lon = lon
        self.days = days

    @property
    def url(self) -> str:
        return self.settings.forecast_url

    def query_params(self) -> dict[str, Any]:
        return {
            "latitude": self.lat,
            "longitude": self.lon,
            "daily": ",".join(DAILY_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "forecast_days": self.days,
            "timezone": self.settings.region.timezone,
        }

    def parse(self, document: bytes) -> ForecastResource:
        """Reshape an Open-Meteo response into a ForecastResource.

        Raises:
            SourceParseError: If the body is not JSON, lacks daily/hourly data or
                carries values that are not numbers
        """
        try:
            payload = json.loads(document)
        except ValueError as e:
            raise SourceParseError(f"Forecast response is not JSON: {e}", source=self.url) from e
        if not isinstance(payload, dict):
            raise SourceParseError("Forecast response is not an object", source=self.url)

        try:
            return self._reshape(payload)
        except (ValueError, TypeError, KeyError) as e:
            # Non-numeric or nested values in the arrays
            raise SourceParseError(f"Malformed forecast values: {e}", source=self.url) from e

    def _reshape(self, payload: dict) -> ForecastResource:
        daily = _frame(payload, "daily", DAILY_FIELDS)
        hourly = _frame(payload, "hourly", HOURLY_FIELDS)

        hourly["timestamp"] = pd.to_datetime(hourly["time"], errors="coerce")
        hourly = hourly.dropna(subset=["timestamp"])
        hourly = hourly[hourly["timestamp"].dt.hour % SAMPLE_EVERY_HOURS == 0].copy()
        hourly["date"] = hourly["timestamp"].dt.strftime("%Y-%m-%d")
        samples_by_date = {date: group for date, group in hourly.groupby("date")}

        days = []
        for row in daily.itertuples(index=False):
            date = str(row.time)
            group = samples_by_date.get(date)
            days.append(self._build_day(row, date, group))

        logger.info(f"Forecast reshaped: {len(days)} days for ({self.lat}, {self.lon})")

        return ForecastResource(
            location=LocationInfo(lat=self.lat, lon=self.lon),
            update_time=self.clock(),
            days=self.days,
            forecast=days,
            source=self.label,
        )

    def _build_day(self, row, date: str, group: Optional[pd.DataFrame]) -> ForecastDay:
        temp_max = _float(row.temp_max)
        snowfall = _float(row.snowfall)
        wind_speed = _float(row.wind_speed)
        weather_code = _int(row.weather_code)

        hourly = []
        if group is not None:
            for sample in group.itertuples(index=False):
                hourly.append(
                    HourlySample(
                        time=str(sample.time),
                        temperature=_float(sample.temperature),
                        snowfall=_float(sample.snowfall),
                        precipitation=_float(sample.precipitation),
                        wind_speed=_float(sample.wind_speed),
                        wind_gusts=_float(sample.wind_gusts),
                        weather_code=_int(sample.weather_code),
                    )
                )

        return ForecastDay(
            date=date,
            temp_max=temp_max,
            temp_min=_float(row.temp_min),
            snowfall=snowfall,
            precipitation=_float(row.precipitation),
            wind_speed=wind_speed,
            wind_gusts=_float(row.wind_gusts),
            weather_code=weather_code,
            weather_description=weather_code_description(weather_code),
            freezing_level=freezing_level(temp_max),
            avalanche_risk=forecast_avalanche_risk(snowfall, wind_speed, temp_max),
            hourly=hourly,
        )

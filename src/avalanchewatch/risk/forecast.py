"""Derived fields for the extended weather forecast.

Simple rules applied to each forecast day:
- Freezing level estimated linearly from the daily maximum temperature
- Avalanche-risk bucket from snowfall, wind and warming
- Human-readable description of the WMO weather code
"""

from typing import Optional

FREEZING_LEVEL_BASE_M = 1500
FREEZING_LEVEL_M_PER_DEGREE = 150

RISK_BUCKETS = ["low", "moderate", "considerable", "high"]

# Thresholds (cm of new snow, km/h, degrees C)
HEAVY_SNOWFALL_CM = 30
SIGNIFICANT_SNOWFALL_CM = 20
MODERATE_SNOWFALL_CM = 10
STRONG_WIND_KMH = 40
WARM_DAY_C = 2

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def freezing_level(temp_max_c: Optional[float]) -> Optional[int]:
    """Estimate freezing level in metres from the daily max temperature."""
    if temp_max_c is None:
        return None
    return round(FREEZING_LEVEL_BASE_M + FREEZING_LEVEL_M_PER_DEGREE * temp_max_c)


def forecast_avalanche_risk(
    snowfall_cm: Optional[float],
    wind_kmh: Optional[float],
    temp_max_c: Optional[float],
) -> str:
    """Bucket a forecast day into low/moderate/considerable/high.

    Args:
        snowfall_cm: Daily snowfall sum in cm
        wind_kmh: Daily max wind speed in km/h
        temp_max_c: Daily max temperature in C

    Returns:
        One of RISK_BUCKETS
    """
    snowfall = snowfall_cm or 0.0
    wind = wind_kmh or 0.0

    if snowfall > HEAVY_SNOWFALL_CM:
        index = 3
    elif snowfall > SIGNIFICANT_SNOWFALL_CM:
        index = 2
    elif snowfall > MODERATE_SNOWFALL_CM:
        index = 1
    else:
        index = 0

    # Wind transport
    if wind > STRONG_WIND_KMH:
        index += 1

    # Warming on fresh snow
    if temp_max_c is not None and temp_max_c > WARM_DAY_C and snowfall > MODERATE_SNOWFALL_CM:
        index += 1

    return RISK_BUCKETS[min(index, len(RISK_BUCKETS) - 1)]


def weather_code_description(code: Optional[int]) -> str:
    if code is None:
        return "Unknown"
    return WEATHER_CODES.get(int(code), "Unknown")

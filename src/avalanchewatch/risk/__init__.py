"""Rule-based derivations for avalanche and forecast content."""

from avalanchewatch.risk.forecast import (
    forecast_avalanche_risk,
    freezing_level,
    weather_code_description,
)
from avalanchewatch.risk.rules import (
    DEFAULT_LEVEL,
    clamp_level,
    description_for,
    elevation_bands_for,
    elevation_bands_for_level,
    normalize_level,
    overall_risk,
    overall_risk_high_only,
    problem_icon,
    problems_for,
    risk_label,
    snowpack_for,
    summary_for,
    tendency_for,
    translate_problem_type,
    translate_text,
    weather_for,
)

__all__ = [
    "DEFAULT_LEVEL",
    "clamp_level",
    "description_for",
    "elevation_bands_for",
    "elevation_bands_for_level",
    "forecast_avalanche_risk",
    "freezing_level",
    "normalize_level",
    "overall_risk",
    "overall_risk_high_only",
    "problem_icon",
    "problems_for",
    "risk_label",
    "snowpack_for",
    "summary_for",
    "tendency_for",
    "translate_problem_type",
    "translate_text",
    "weather_code_description",
]

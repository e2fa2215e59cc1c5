"""Risk-rule engine for avalanche bulletins.

Maps a European avalanche danger level (1-5) to the narrative content of a
bulletin: descriptions, summaries, avalanche problems, snowpack, weather and
trend text, and the three elevation bands.

Every function is total: a level outside 1-5 (or not an integer at all) is
treated as level 3 ("considerable"), except for the elevation band builders
which clamp into range.

Example:
    >>> from avalanchewatch.risk import elevation_bands_for, summary_for
    >>> [band.risk for band in elevation_bands_for(4, 2)]
    [4, 3, 2]
"""

import re
from typing import Any

from avalanchewatch.api.schemas import (
    AvalancheProblem,
    ElevationBand,
    Snowpack,
    WeatherNarrative,
)

MIN_LEVEL = 1
MAX_LEVEL = 5
DEFAULT_LEVEL = 3

RISK_LABELS = {
    1: "Low",
    2: "Moderate",
    3: "Considerable",
    4: "High",
    5: "Very High",
}

_DESCRIPTIONS = {
    1: "Generally safe conditions. Natural avalanches unlikely.",
    2: "Heightened avalanche conditions on specific terrain. Careful evaluation needed.",
    3: "Dangerous avalanche conditions. Careful snowpack evaluation required.",
    4: "Very dangerous conditions. Travel in avalanche terrain not recommended.",
    5: "Extraordinary avalanche situation. Avoid all avalanche terrain.",
}

_SUMMARIES = {
    1: "Low avalanche risk. Generally safe conditions in most terrain.",
    2: (
        "Moderate avalanche risk. Evaluate terrain and snowpack carefully, "
        "especially on steep slopes."
    ),
    3: (
        "Considerable avalanche risk. Dangerous conditions exist. Careful snowpack "
        "evaluation and conservative terrain choices essential."
    ),
    4: (
        "High avalanche risk. Very dangerous conditions. Travel in avalanche "
        "terrain should be avoided."
    ),
    5: (
        "Very high avalanche risk. Extraordinary avalanche situation. "
        "Avoid all avalanche terrain."
    ),
}

# Elevation strata, highest first
HIGH_BAND = "Above 2500m"
MID_BAND = "2000m - 2500m"
LOW_BAND = "Below 2000m"

HIGH_ASPECTS = ["N", "NE", "E", "NW"]
MID_ASPECTS = ["N", "NE", "E"]
LOW_ASPECTS = ["S", "SE", "SW", "W"]

# Bulletin vocabulary for avalanche problem tokens
PROBLEM_TYPES = {
    "neige_ventee": "Wind Slab",
    "plaques": "Wind Slab",
    "neige_fraiche": "New Snow",
    "neige_humide": "Wet Snow",
    "sous-couche": "Persistent Weak Layers",
    "fond": "Glide Avalanches",
}

PROBLEM_ICONS = {
    "neige_ventee": "💨",
    "plaques": "💨",
    "neige_fraiche": "❄️",
    "neige_humide": "💧",
    "sous-couche": "⚠️",
    "fond": "🏔️",
}

DEFAULT_ICON = "⚠️"

# Ordered: longer phrases must be replaced before their sub-words
_TRANSLATIONS = [
    (r"risque fort", "high risk"),
    (r"risque marqué", "considerable risk"),
    (r"risque limité", "moderate risk"),
    (r"risque faible", "low risk"),
    (r"plaques", "slabs"),
    (r"versants", "slopes"),
]


def normalize_level(level: Any) -> int:
    """Return level if it is an integer in 1-5, otherwise the default level 3."""
    if isinstance(level, bool) or not isinstance(level, int):
        return DEFAULT_LEVEL
    if MIN_LEVEL <= level <= MAX_LEVEL:
        return level
    return DEFAULT_LEVEL


def clamp_level(level: int) -> int:
    """Clamp a derived risk level into 1-5."""
    return max(MIN_LEVEL, min(MAX_LEVEL, int(level)))


def risk_label(level: Any) -> str:
    return RISK_LABELS[normalize_level(level)]


def description_for(level: Any) -> str:
    """Short description of what a danger level means on the ground."""
    return _DESCRIPTIONS[normalize_level(level)]


def summary_for(level: Any) -> str:
    """Bulletin summary used when the source provides none."""
    return _SUMMARIES[normalize_level(level)]


def overall_risk(high: int, low: int) -> int:
    """Combine zone risks into the headline level.

    The headline is the worst of the two zones so a bulletin never reports a
    lower danger than any of its elevation bands.
    """
    return clamp_level(max(high, low))


def overall_risk_high_only(high: int, low: int) -> int:
    """Headline level taken from the high-altitude zone alone.

    Under-reports when the low zone is rated above the high zone; kept for
    comparison with bulletins produced by that convention.
    """
    return clamp_level(high)


def problems_for(level: Any) -> list[AvalancheProblem]:
    """Default avalanche problems for a danger level.

    Args:
        level: Danger level 1-5

    Returns:
        Ordered list: wind slab, persistent weak layers, wet snow, depending
        on thresholds. Level 1 gets a single "generally stable" entry.
    """
    level = normalize_level(level)
    problems = []

    if level >= 2:
        problems.append(
            AvalancheProblem(
                type="Wind Slab",
                severity="High" if level >= 3 else "Moderate",
                distribution=(
                    "Widespread above 2200m" if level >= 4 else "Specific areas above 2200m"
                ),
                sensitivity=(
                    "High - easily triggered" if level >= 3 else "Moderate - triggered by heavy loads"
                ),
                icon="💨",
            )
        )

    if level >= 3:
        problems.append(
            AvalancheProblem(
                type="Persistent Weak Layers",
                severity="High" if level >= 4 else "Moderate",
                distribution="Specific aspects (N, NE, E)",
                sensitivity="Moderate - careful snowpack tests needed",
                icon="⚠️",
            )
        )

    if level >= 2:
        if level >= 4:
            wet_severity = "High"
        elif level == 3:
            wet_severity = "Moderate"
        else:
            wet_severity = "Low"
        problems.append(
            AvalancheProblem(
                type="Wet Snow",
                severity=wet_severity,
                distribution="Sunny aspects (SE, S, SW) below 2500m",
                sensitivity="Increases with daytime warming",
                icon="💧",
            )
        )

    if not problems:
        problems.append(
            AvalancheProblem(
                type="Generally stable",
                severity="Low",
                distribution="Isolated extreme terrain",
                sensitivity="Low - large loads required",
                icon="✅",
            )
        )

    return problems


def snowpack_for(level: Any) -> Snowpack:
    level = normalize_level(level)
    if level >= 4:
        return Snowpack(
            recent_snow="50+ cm in last 72 hours",
            total_depth="220 cm at 2500m",
            quality="Heavily wind loaded, poorly bonded slabs on most aspects",
        )
    if level >= 3:
        return Snowpack(
            recent_snow="30 cm in last 48 hours",
            total_depth="185 cm at 2500m",
            quality="Wind affected above 2200m, powder in sheltered areas",
        )
    if level >= 2:
        return Snowpack(
            recent_snow="10-15 cm in last 48 hours",
            total_depth="150 cm at 2500m",
            quality="Settling well, isolated wind slabs near ridges",
        )
    return Snowpack(
        recent_snow="No significant new snow",
        total_depth="Variable by elevation",
        quality="Well consolidated, spring cycles on sunny aspects",
    )


def weather_for(level: Any) -> WeatherNarrative:
    level = normalize_level(level)
    if level >= 4:
        return WeatherNarrative(
            forecast="Heavy snowfall continuing with strong winds.",
            temperature="Cold, rising in the afternoon at mid elevations",
            wind="W to NW 80-100 km/h at ridges",
        )
    if level >= 3:
        return WeatherNarrative(
            forecast="Light snow showers continuing. Strong NW winds decreasing.",
            temperature="Cold at altitude, slight warming trend from tomorrow",
            wind="NW 60-80 km/h at ridges, decreasing to 40-50 km/h",
        )
    if level >= 2:
        return WeatherNarrative(
            forecast="Mostly cloudy with occasional light snow.",
            temperature="Seasonal, freezing level around 1500m",
            wind="Moderate NW 30-40 km/h at ridges",
        )
    return WeatherNarrative(
        forecast="Sunny and settled.",
        temperature="Mild in the afternoon, cold nights",
        wind="Light and variable",
    )


def tendency_for(level: Any) -> str:
    level = normalize_level(level)
    if level >= 4:
        return (
            "Risk remains high while snowfall and wind persist. Little "
            "improvement expected before the storm ends."
        )
    if level >= 3:
        return (
            "Risk will gradually decrease over next 48 hours as snowpack "
            "consolidates and winds decrease."
        )
    if level >= 2:
        return "Conditions expected to stabilize gradually."
    return "Stable conditions expected to persist."


def elevation_bands_for(high_risk: int, low_risk: int) -> list[ElevationBand]:
    """Build the three elevation bands from high and low zone risks.

    Bands are ordered high, mid, low. Risk never increases as elevation
    decreases: a low zone rated above the high zone raises the high band to
    match, so no band sits below the overall max rule. The mid band is
    max(high - 1, low).

    Args:
        high_risk: Risk above the zone boundary
        low_risk: Risk below the zone boundary

    Returns:
        List of exactly 3 ElevationBand
    """
    low = clamp_level(low_risk)
    high = max(clamp_level(high_risk), low)
    mid = clamp_level(max(high - 1, low))
    return _bands(high, mid, low)


def elevation_bands_for_level(level: Any) -> list[ElevationBand]:
    """Elevation bands centred on a single headline level (one step either side)."""
    level = normalize_level(level)
    return _bands(clamp_level(level + 1), level, clamp_level(level - 1))


def _bands(high: int, mid: int, low: int) -> list[ElevationBand]:
    return [
        ElevationBand(
            elevation=HIGH_BAND,
            risk=high,
            aspects=list(HIGH_ASPECTS),
            description=description_for(high),
        ),
        ElevationBand(
            elevation=MID_BAND,
            risk=mid,
            aspects=list(MID_ASPECTS),
            description=description_for(mid),
        ),
        ElevationBand(
            elevation=LOW_BAND,
            risk=low,
            aspects=list(LOW_ASPECTS),
            description=description_for(low),
        ),
    ]


def translate_problem_type(token: str) -> str:
    """English label for a bulletin problem token; unknown tokens pass through."""
    return PROBLEM_TYPES.get(token.strip().lower(), token.strip())


def problem_icon(token: str) -> str:
    return PROBLEM_ICONS.get(token.strip().lower(), DEFAULT_ICON)


def translate_text(text: str) -> str:
    """Translate common French bulletin phrases to English."""
    for pattern, replacement in _TRANSLATIONS:
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
    return text

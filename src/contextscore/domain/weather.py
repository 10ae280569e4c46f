"""
Weather condition vocabulary.

Weather providers report conditions as free text ("맑음", "Light rain", "overcast clouds").
Scoring only ever sees the closed `WeatherCondition` enum: the text is normalized once,
when the context payload is validated, and never re-parsed by the feature scorers.
"""

from __future__ import annotations

import re
from enum import Enum


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    FOGGY = "foggy"
    UNKNOWN = "unknown"


# Checked in order; the first pattern that matches wins ("구름 조금, 비" is cloudy).
_CONDITION_PATTERNS: list[tuple[WeatherCondition, re.Pattern[str]]] = [
    (WeatherCondition.SUNNY, re.compile(r"맑음|sunny|clear", re.IGNORECASE)),
    (WeatherCondition.CLOUDY, re.compile(r"구름|흐림|cloudy|overcast", re.IGNORECASE)),
    (WeatherCondition.RAINY, re.compile(r"비|rain|shower", re.IGNORECASE)),
    (WeatherCondition.SNOWY, re.compile(r"눈|snow", re.IGNORECASE)),
    (WeatherCondition.FOGGY, re.compile(r"안개|fog|mist", re.IGNORECASE)),
]

_CONDITION_VALUES = {c.value for c in WeatherCondition}


def parse_condition(value: str | WeatherCondition | None) -> WeatherCondition:
    """Map a provider's free-text condition onto `WeatherCondition` (unknown when nothing matches)."""
    if value is None:
        return WeatherCondition.UNKNOWN
    if isinstance(value, WeatherCondition):
        return value
    text = str(value).strip()
    if not text:
        return WeatherCondition.UNKNOWN
    if text.lower() in _CONDITION_VALUES:
        return WeatherCondition(text.lower())
    for condition, pattern in _CONDITION_PATTERNS:
        if pattern.search(text):
            return condition
    return WeatherCondition.UNKNOWN

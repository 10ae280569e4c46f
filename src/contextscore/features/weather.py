# src/contextscore/features/weather.py
"""
Weather feature (place-level).

This module converts a weather reading into per-group multiplier tables and scores a place
against the groups it belongs to (outdoor, indoor, cafe, viewpoint).

Why a separate `features/weather.py` layer?
- The context payload carries *raw-ish* values (temperature, rain probability) that can be
  missing or malformed.
- Features define *product rules* for how those values translate into a multiplier:
  - Missing data -> neutral multiplier (fail-open) so we can still rank places.
  - Malformed numbers (NaN) -> that one input is ignored and a warning is logged.
  - Indoor/outdoor/viewpoint groups decide which table applies.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from contextscore.config.settings import Settings, get_settings
from contextscore.domain.models import WeatherReading
from contextscore.domain.weather import WeatherCondition
from contextscore.features.traits import PlaceTraitSet
from contextscore.scoring.composite import NEUTRAL, FactorAccumulator, FactorResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherFactors:
    condition: WeatherCondition = WeatherCondition.UNKNOWN
    is_rainy: bool = False
    is_snowy: bool = False
    is_foggy: bool = False
    is_sunny: bool = False
    is_cloudy: bool = False
    is_good_weather: bool = True
    is_dangerous_weather: bool = False
    temperature: float | None = None
    rain_probability: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    uv_index: float | None = None
    tables: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def is_hot(self) -> bool:
        return self.temperature is not None and self.temperature > 30

    @property
    def is_cold(self) -> bool:
        return self.temperature is not None and self.temperature < 5

    @property
    def has_good_visibility(self) -> bool:
        clear_cloudy = self.is_cloudy and self.rain_probability is not None and self.rain_probability < 30
        return self.is_sunny or clear_cloudy


def _finite(value: float | None, name: str) -> float | None:
    if value is None:
        return None
    if not math.isfinite(float(value)):
        logger.warning("Ignoring non-finite weather %s: %r", name, value)
        return None
    return float(value)


def calculate_weather_factors(weather: WeatherReading | None) -> WeatherFactors:
    """Build weather tables (neutral when no reading is available)."""
    if weather is None:
        return WeatherFactors()

    condition = weather.condition
    t = _finite(weather.temperature, "temperature")
    rain = _finite(weather.rain_probability, "rain_probability")
    wind = _finite(weather.wind_speed, "wind_speed")

    # --- Step 1) Condition flags (rain probability alone can make it "rainy") ---
    is_rainy = condition == WeatherCondition.RAINY or (rain is not None and rain > 50)
    is_snowy = condition == WeatherCondition.SNOWY
    is_foggy = condition == WeatherCondition.FOGGY
    is_sunny = condition == WeatherCondition.SUNNY
    is_cloudy = condition == WeatherCondition.CLOUDY

    # --- Step 2) Good weather: dry and comfortable (unknown temperature counts as comfortable) ---
    is_good = not (is_rainy or is_snowy or is_foggy) and (t is None or 15 < t < 30)

    # --- Step 3) Dangerous weather: heavy rain, strong wind or extreme temperature ---
    is_dangerous = (
        (is_rainy and rain is not None and rain > 80)
        or (wind is not None and wind > 20)
        or (t is not None and (t > 35 or t < 0))
    )

    hot = t is not None and t > 30
    visibility = is_sunny or (is_cloudy and rain is not None and rain < 30)

    tables = {
        "outdoor": {
            "sunny": (0.9 if hot else 1.3) if is_sunny else 1.0,
            "cloudy": 1.1 if is_cloudy else 1.0,
            "rainy": 0.5 if is_rainy else 1.0,
            "snowy": 0.6 if is_snowy else 1.0,
            "foggy": 0.7 if is_foggy else 1.0,
            "hot": 0.8 if hot else 1.0,
            "cold": 0.7 if t is not None and t < 5 else 1.0,
            "good_weather": 1.3 if is_good else 0.9,
            "dangerous_weather": 0.2 if is_dangerous else 1.0,
        },
        "indoor": {
            "sunny": 0.9 if is_sunny else 1.0,
            "cloudy": 1.1 if is_cloudy else 1.0,
            "rainy": 1.3 if is_rainy else 1.0,
            "snowy": 1.3 if is_snowy else 1.0,
            "foggy": 1.2 if is_foggy else 1.0,
            "bad_weather": 1.3 if not is_good else 0.9,
        },
        "cafe": {
            "rainy": 1.2 if is_rainy else 1.0,
            "snowy": 1.1 if is_snowy else 1.0,
            "sunny": 1.0,
            "hot": 1.2 if hot else 1.0,
        },
        # Restaurants are weather-insensitive.
        "restaurant": {"all_weather": 1.0},
        "viewpoint": {
            "sunny": 1.3 if is_sunny else 1.0,
            "cloudy": 0.9 if is_cloudy else 1.0,
            "rainy": 0.6 if is_rainy else 1.0,
            "foggy": 0.5 if is_foggy else 1.0,
            "good_visibility": 1.2 if visibility else 0.8,
        },
    }

    return WeatherFactors(
        condition=condition,
        is_rainy=is_rainy,
        is_snowy=is_snowy,
        is_foggy=is_foggy,
        is_sunny=is_sunny,
        is_cloudy=is_cloudy,
        is_good_weather=is_good,
        is_dangerous_weather=is_dangerous,
        temperature=t,
        rain_probability=rain,
        humidity=_finite(weather.humidity, "humidity"),
        wind_speed=wind,
        uv_index=_finite(weather.uv_index, "uv_index"),
        tables=tables,
    )


def score_weather(traits: PlaceTraitSet, factors: WeatherFactors, *, settings: Settings | None = None) -> FactorResult:
    if not factors.tables:
        return NEUTRAL
    acc = FactorAccumulator(settings or get_settings())

    # Only the entries whose condition holds are applied; the others are informational.
    if traits.is_outdoor:
        outdoor = factors.tables["outdoor"]
        if factors.is_rainy:
            acc.apply("outdoor.rainy", outdoor["rainy"])
        if factors.is_snowy:
            acc.apply("outdoor.snowy", outdoor["snowy"])
        if factors.is_foggy:
            acc.apply("outdoor.foggy", outdoor["foggy"])
        if factors.is_sunny:
            acc.apply("outdoor.sunny", outdoor["sunny"])
        if factors.is_good_weather:
            acc.apply("outdoor.good_weather", outdoor["good_weather"])
        if factors.is_dangerous_weather:
            acc.apply("outdoor.dangerous_weather", outdoor["dangerous_weather"])

    if traits.is_indoor:
        indoor = factors.tables["indoor"]
        if factors.is_rainy:
            acc.apply("indoor.rainy", indoor["rainy"])
        if factors.is_snowy:
            acc.apply("indoor.snowy", indoor["snowy"])
        if not factors.is_good_weather:
            acc.apply("indoor.bad_weather", indoor["bad_weather"])

    if traits.has_category("cafe"):
        cafe = factors.tables["cafe"]
        if factors.is_rainy:
            acc.apply("cafe.rainy", cafe["rainy"])
        if factors.is_hot:
            acc.apply("cafe.hot", cafe["hot"])

    if traits.is_viewpoint:
        view = factors.tables["viewpoint"]
        if factors.is_sunny:
            acc.apply("viewpoint.sunny", view["sunny"])
        if factors.is_rainy:
            acc.apply("viewpoint.rainy", view["rainy"])
        if factors.is_foggy:
            acc.apply("viewpoint.foggy", view["foggy"])
        if factors.has_good_visibility:
            acc.apply("viewpoint.good_visibility", view["good_visibility"])

    return acc.result()

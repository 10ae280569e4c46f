"""
Time feature (place-level).

Turns the request's clock time and day of week into per-category multiplier tables, then
scores a place against the table of its category.

How a time table is read:
- Each category table holds one entry per time window (breakfast/lunch/dinner, morning/...).
- Every entry is already resolved for the current hour, so scoring multiplies *all* entries
  of the place's table together (out-of-window entries are 1.0 or a penalty).
- Weekend and weekday modifiers are applied on top.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from contextscore.config.settings import Settings, get_settings
from contextscore.core.time import sunday_first_weekday
from contextscore.features.traits import PlaceTraitSet
from contextscore.scoring.composite import NEUTRAL, FactorAccumulator, FactorResult


@dataclass(frozen=True)
class TimeFactors:
    time_of_day: str = "unknown"
    day_of_week: int | None = None
    is_weekend: bool = False
    is_day_time: bool = True
    is_peak_hour: bool = False
    current_hour: int | None = None
    current_minute: int | None = None
    tables: dict[str, dict[str, float]] = field(default_factory=dict)
    weekend: dict[str, float] = field(default_factory=dict)
    weekday: dict[str, float] = field(default_factory=dict)


def time_of_day(hour: int) -> str:
    if 5 <= hour < 11:
        return "morning"
    if 11 <= hour < 14:
        return "lunch"
    if 14 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    if hour >= 21 or hour < 1:
        return "night"
    return "late_night"


def _category_tables(h: int, *, is_weekend: bool, is_day_time: bool, is_peak_hour: bool) -> dict[str, dict[str, float]]:
    return {
        "restaurant": {
            "breakfast": 1.3 if 6 <= h < 10 else (0.7 if h < 6 else 1.0),
            "lunch": 1.3 if 11 <= h < 14 else (0.8 if 14 <= h < 16 else 1.0),
            "dinner": 1.3 if 18 <= h < 21 else (0.8 if h >= 21 or h < 5 else 1.0),
        },
        "cafe": {
            "morning": 1.2 if 8 <= h < 11 else 1.0,
            "afternoon": 1.2 if 14 <= h < 17 else 1.0,
            "evening": 1.1 if 18 <= h < 21 else 1.0,
            "late_night": (0.9 if is_peak_hour else 1.1) if (h >= 21 or h < 1) else 1.0,
        },
        "bar": {
            "daytime": 0.8 if 12 <= h < 17 else 1.0,
            "evening": 1.2 if 17 <= h < 21 else 1.0,
            "night": 1.3 if (h >= 21 or h < 2) else 0.7,
        },
        "outdoor_activity": {
            "morning": 1.2 if 8 <= h < 11 else 1.0,
            "afternoon": 1.1 if 12 <= h < 17 else 1.0,
            "evening": (1.1 if is_day_time else 0.8) if 17 <= h < 20 else 1.0,
            "night": 0.7 if (h >= 20 or h < 5) else 1.0,
        },
        "indoor_activity": {
            "anytime": 1.0,
            "bad_weather": 1.2,
            "night": 1.1 if (h >= 19 or h < 6) else 1.0,
        },
        "shopping": {
            "daytime": 1.1 if 10 <= h < 19 else 1.0,
            "evening": (1.1 if is_weekend else 0.9) if 19 <= h < 22 else 1.0,
            "night": 0.7 if (h >= 22 or h < 6) else 1.0,
        },
        "tourism": {
            "morning": 1.2 if 9 <= h < 12 else 1.0,
            "afternoon": 1.1 if 12 <= h < 17 else 1.0,
            "evening": 0.9 if 17 <= h < 20 else 1.0,
            "night": 0.7 if (h >= 20 or h < 7) else 1.0,
        },
    }


def calculate_time_factors(time: datetime | None, day_of_week: int | None = None) -> TimeFactors:
    """Build the time tables for `time` (neutral when no time is known)."""
    if time is None:
        return TimeFactors()

    h = int(time.hour)
    day = day_of_week if day_of_week is not None else sunday_first_weekday(time)
    is_weekend = day in (0, 6)
    is_day_time = 7 <= h < 19
    is_peak_hour = (11 <= h < 14) or (18 <= h < 21)

    if is_weekend:
        weekend = {
            "outdoor_activity": 1.2,
            "cafe": 1.1,
            "restaurant": 1.1,
            "bar": 1.2,
            "tourism": 1.2,
            "shopping": 1.2,
        }
        weekday: dict[str, float] = {}
    else:
        weekend = {}
        weekday = {
            "work_friendly": 1.2 if 9 <= h < 18 else 1.0,
            "quick_lunch": 1.2 if 11 <= h < 14 else 1.0,
            "after_work": 1.2 if 18 <= h < 21 else 1.0,
        }

    return TimeFactors(
        time_of_day=time_of_day(h),
        day_of_week=day,
        is_weekend=is_weekend,
        is_day_time=is_day_time,
        is_peak_hour=is_peak_hour,
        current_hour=h,
        current_minute=int(time.minute),
        tables=_category_tables(h, is_weekend=is_weekend, is_day_time=is_day_time, is_peak_hour=is_peak_hour),
        weekend=weekend,
        weekday=weekday,
    )


def get_current_time_context(date: datetime | None = None) -> TimeFactors:
    """Time factors for `date`, defaulting to the current local time."""
    return calculate_time_factors(date or datetime.now())


def score_time(traits: PlaceTraitSet, factors: TimeFactors, *, settings: Settings | None = None) -> FactorResult:
    if not factors.tables:
        return NEUTRAL
    settings = settings or get_settings()
    acc = FactorAccumulator(settings)

    table = factors.tables.get(traits.category or "")
    if table is None and settings.features.time.unknown_category_table:
        table = factors.tables.get(settings.features.time.unknown_category_table)
    for window, value in (table or {}).items():
        acc.apply(window, value)

    if factors.is_weekend:
        acc.apply("weekend", factors.weekend.get(traits.category or "", 1.0))
    else:
        if "work_friendly" in traits.groups:
            acc.apply("work_friendly", factors.weekday.get("work_friendly", 1.0))
        if traits.has_category("restaurant") or traits.sub_category == "lunch":
            acc.apply("quick_lunch", factors.weekday.get("quick_lunch", 1.0))
        if traits.has_category("bar", "restaurant") or "after_work" in traits.groups:
            acc.apply("after_work", factors.weekday.get("after_work", 1.0))

    return acc.result()

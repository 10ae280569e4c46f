from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from contextscore.config.overrides import apply_settings_overrides
from contextscore.config.settings import get_settings
from contextscore.domain.models import Place
from contextscore.features.time import calculate_time_factors, get_current_time_context, score_time, time_of_day
from contextscore.features.traits import build_trait_set

SEOUL = ZoneInfo("Asia/Seoul")


@pytest.mark.parametrize(
    ("hour", "expected"),
    [
        (5, "morning"),
        (10, "morning"),
        (11, "lunch"),
        (15, "afternoon"),
        (19, "evening"),
        (22, "night"),
        (0, "night"),
        (3, "late_night"),
    ],
)
def test_time_of_day_buckets(hour, expected):
    assert time_of_day(hour) == expected


def test_day_of_week_is_derived_sunday_first():
    saturday = calculate_time_factors(datetime(2026, 10, 17, 15, 0, tzinfo=SEOUL))
    sunday = calculate_time_factors(datetime(2026, 10, 18, 15, 0, tzinfo=SEOUL))
    monday = calculate_time_factors(datetime(2026, 10, 19, 15, 0, tzinfo=SEOUL))

    assert (saturday.day_of_week, saturday.is_weekend) == (6, True)
    assert (sunday.day_of_week, sunday.is_weekend) == (0, True)
    assert (monday.day_of_week, monday.is_weekend) == (1, False)


def test_explicit_day_of_week_wins_over_timestamp():
    factors = calculate_time_factors(datetime(2026, 10, 19, 15, 0, tzinfo=SEOUL), day_of_week=6)
    assert factors.is_weekend


def test_missing_time_is_neutral():
    settings = get_settings()
    traits = build_trait_set(Place(id="c", category="cafe"), settings=settings)

    factors = calculate_time_factors(None)

    assert factors.time_of_day == "unknown"
    assert score_time(traits, factors, settings=settings).multiplier == 1.0


def test_weekend_afternoon_cafe():
    settings = get_settings()
    traits = build_trait_set(Place(id="c", category="cafe"), settings=settings)
    factors = calculate_time_factors(datetime(2026, 10, 17, 15, 0, tzinfo=SEOUL))

    result = score_time(traits, factors, settings=settings)

    # afternoon window 1.2 * weekend cafe 1.1
    assert result.multiplier == pytest.approx(1.32)
    assert result.boosts == ("afternoon", "weekend")


def test_weekday_lunch_restaurant():
    settings = get_settings()
    traits = build_trait_set(Place(id="r", category="restaurant"), settings=settings)
    factors = calculate_time_factors(datetime(2026, 10, 14, 12, 0, tzinfo=SEOUL))

    result = score_time(traits, factors, settings=settings)

    # lunch window 1.3 * weekday quick_lunch 1.2
    assert result.multiplier == pytest.approx(1.56)
    assert "quick_lunch" in result.boosts


def test_bar_in_the_morning_is_penalized():
    settings = get_settings()
    traits = build_trait_set(Place(id="b", category="bar"), settings=settings)
    factors = calculate_time_factors(datetime(2026, 10, 14, 10, 0, tzinfo=SEOUL))

    result = score_time(traits, factors, settings=settings)

    assert result.multiplier == pytest.approx(0.7)
    assert result.reductions == ("night",)


def test_unknown_category_borrows_configured_table():
    settings = get_settings()
    traits = build_trait_set(Place(id="m", category="museum"), settings=settings)
    factors = calculate_time_factors(datetime(2026, 10, 14, 12, 0, tzinfo=SEOUL))

    # Default: the restaurant table applies (lunch 1.3).
    assert score_time(traits, factors, settings=settings).multiplier == pytest.approx(1.3)

    neutral = apply_settings_overrides(settings, {"features": {"time": {"unknown_category_table": None}}})
    assert score_time(traits, factors, settings=neutral).multiplier == 1.0


def test_get_current_time_context_uses_given_date():
    factors = get_current_time_context(datetime(2026, 10, 14, 20, 30, tzinfo=SEOUL))

    assert factors.current_hour == 20
    assert factors.current_minute == 30
    assert factors.time_of_day == "evening"
    assert factors.is_peak_hour

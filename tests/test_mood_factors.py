import pytest

from contextscore.config.settings import get_settings
from contextscore.domain.models import MoodState, Place
from contextscore.features.mood import calculate_mood_compatibility, score_mood
from contextscore.features.traits import build_trait_set


def _traits(**kwargs):
    return build_trait_set(Place(id="p", **kwargs), settings=get_settings())


def test_unknown_mood_falls_back_to_neutral_table():
    factors = calculate_mood_compatibility(MoodState(label="Confused"))

    assert factors.mood == "confused"
    assert factors.factors == {"neutral": 1.0}
    assert score_mood(_traits(tags=["quiet"]), factors).multiplier == 1.0


def test_missing_mood_is_neutral():
    assert calculate_mood_compatibility(None).factors == {}
    assert calculate_mood_compatibility(MoodState(label="  ")).factors == {}


def test_intensity_at_or_below_midpoint_keeps_base_table():
    low = calculate_mood_compatibility(MoodState(label="happy", intensity=1))
    mid = calculate_mood_compatibility(MoodState(label="happy", intensity=3))

    assert low.intensity_factor == mid.intensity_factor == 1.0
    assert low.factors["active"] == pytest.approx(1.2)


def test_high_intensity_strengthens_dominant_and_opposing_traits():
    factors = calculate_mood_compatibility(MoodState(label="happy", intensity=4.5))

    assert factors.intensity_factor == pytest.approx(1.5)
    assert factors.factors["active"] == pytest.approx(1.8)
    assert factors.factors["quiet"] == pytest.approx(0.6)
    # Unscaled entries stay put.
    assert factors.factors["outdoors"] == pytest.approx(1.1)


def test_stressed_user_prefers_quiet_over_loud_places():
    factors = calculate_mood_compatibility(MoodState(label="stressed", intensity=5))

    quiet = score_mood(_traits(category="cafe", tags=["조용한"]), factors)
    loud = score_mood(_traits(category="bar", tags=["라이브", "붐비는"]), factors)

    assert quiet.multiplier == pytest.approx(1.2)
    assert quiet.boosts == ("quiet",)
    # 0.6/k * 0.7/k is far below the lower bound.
    assert loud.multiplier == 0.5
    assert set(loud.reductions) == {"crowded", "loud"}


def test_hungry_user_and_restaurant_category():
    factors = calculate_mood_compatibility(MoodState(label="hungry"))
    result = score_mood(_traits(category="restaurant"), factors)

    # restaurant 1.4 * food 1.3 (both derived from the category)
    assert result.multiplier == pytest.approx(1.82)


def test_relaxing_and_serene_tags_are_recognized():
    traits = _traits(tags=["휴식", "고요함"])

    assert {"relaxing", "serene"} <= traits.traits


def test_high_intensity_strengthens_stressed_preference_for_relaxing_places():
    traits = _traits(tags=["relaxing", "serene"])

    calm = score_mood(traits, calculate_mood_compatibility(MoodState(label="stressed", intensity=3)))
    intense = score_mood(traits, calculate_mood_compatibility(MoodState(label="stressed", intensity=5)))

    # relaxing 1.3 * serene 1.2 at the midpoint
    assert calm.multiplier == pytest.approx(1.56)
    assert intense.multiplier > calm.multiplier
    assert set(intense.boosts) == {"relaxing", "serene"}


def test_every_mood_table_trait_has_a_vocabulary():
    settings = get_settings()
    known = set(settings.traits.mood_traits) | set(settings.traits.mood_trait_categories)

    for label in ("happy", "sad", "stressed", "excited", "relaxed", "bored", "tired", "hungry", "romantic"):
        table = calculate_mood_compatibility(MoodState(label=label)).factors
        assert set(table) <= known, label

import math

import pytest

from contextscore.config.settings import get_settings
from contextscore.domain.models import GeoPoint, LocationContext, Place
from contextscore.features.location import calculate_location_relevance, place_distance, score_location


def _factors(**kwargs):
    return calculate_location_relevance(LocationContext(**kwargs), settings=get_settings())


HERE = GeoPoint(lat=37.5665, lon=126.9780)


def test_missing_location_is_neutral():
    assert not calculate_location_relevance(None).has_location
    assert not _factors(transport_mode="walking").has_location
    assert score_location(Place(id="p", distance=10), calculate_location_relevance(None)).multiplier == 1.0


def test_transport_mode_picks_max_distance():
    assert _factors(coordinates=HERE, transport_mode="walking").max_distance == 1500
    assert _factors(coordinates=HERE, transport_mode="car").max_distance == 15000
    assert _factors(coordinates=HERE, transport_mode="rocket").max_distance == 3000
    assert _factors(coordinates=HERE).max_distance == 3000


@pytest.mark.parametrize(
    ("distance", "expected"),
    [
        (0, 1.3),
        (300, 1.3),
        (500, 1.2),
        (750, 1.2),
        (1000, 1.1),
        (1300, 1.0),
        (1500, 1.0),
        (2000, 0.8),
        (2300, 0.6),
    ],
)
def test_walking_distance_buckets(distance, expected):
    factors = _factors(coordinates=HERE, transport_mode="walking")
    result = score_location(Place(id="p", distance=distance), factors)
    assert result.multiplier == pytest.approx(expected)


def test_region_match_boosts():
    factors = _factors(region="서울", sub_region="강남구")

    same_sub = score_location(Place(id="a", region="서울", sub_region="강남구"), factors)
    same = score_location(Place(id="b", region="서울", sub_region="마포구"), factors)
    other = score_location(Place(id="c", region="부산"), factors)

    assert same_sub.multiplier == pytest.approx(1.2 * 1.3)
    assert same_sub.boosts == ("same_region", "same_sub_region")
    assert same.multiplier == pytest.approx(1.2)
    assert other.multiplier == pytest.approx(0.9)
    assert other.reductions == ("different_region",)


def test_haversine_fallback_when_distance_missing():
    factors = _factors(coordinates=HERE, transport_mode="walking")
    nearby = Place(id="p", coordinates=GeoPoint(lat=37.5670, lon=126.9785))

    distance = place_distance(nearby, factors)

    assert distance is not None
    assert distance < 100
    assert score_location(nearby, factors).multiplier == pytest.approx(1.3)


def test_malformed_distance_is_skipped_with_warning(caplog):
    factors = _factors(coordinates=HERE, transport_mode="walking")

    with caplog.at_level("WARNING", logger="contextscore"):
        assert place_distance(Place(id="neg", distance=-5), factors) is None
        assert place_distance(Place(id="nan", distance=math.nan), factors) is None

    assert "malformed distance" in caplog.text
    assert score_location(Place(id="neg", distance=-5), factors).multiplier == 1.0

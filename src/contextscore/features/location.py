"""
Location feature (place-level).

Proximity is judged relative to how the user travels: the transport mode picks a comfortable
maximum distance, and the place's distance is bucketed as a fraction of it (very close, close,
medium, far, very far). A region/sub-region match with the user's area adds a boost; a place
in another region gets a mild penalty.

The caller normally precomputes `place.distance`. When it is missing but both the user and
the place have coordinates, we fall back to the haversine distance.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from contextscore.config.settings import DistanceBucket, RegionMultipliers, Settings, get_settings
from contextscore.core.geo import haversine_m
from contextscore.domain.models import GeoPoint, LocationContext, Place
from contextscore.scoring.composite import NEUTRAL, FactorAccumulator, FactorResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationFactors:
    has_location: bool = False
    coordinates: GeoPoint | None = None
    region: str | None = None
    sub_region: str | None = None
    transport_mode: str | None = None
    max_distance: float = 0.0
    distance_buckets: tuple[DistanceBucket, ...] = ()
    region_multipliers: RegionMultipliers = field(default_factory=RegionMultipliers)

    def distance_bucket(self, distance: float) -> DistanceBucket | None:
        """First bucket whose threshold `distance` satisfies (None between medium and far)."""
        for bucket in self.distance_buckets:
            threshold = self.max_distance * bucket.fraction
            if bucket.direction == "within" and distance <= threshold:
                return bucket
            if bucket.direction == "beyond" and distance > threshold:
                return bucket
        return None


def calculate_location_relevance(
    location: LocationContext | None, *, settings: Settings | None = None
) -> LocationFactors:
    if location is None or (location.coordinates is None and not location.region):
        return LocationFactors()

    cfg = (settings or get_settings()).features.location
    max_distance = float(cfg.max_distance_m.get(location.transport_mode or "", cfg.default_max_distance_m))
    return LocationFactors(
        has_location=True,
        coordinates=location.coordinates,
        region=location.region,
        sub_region=location.sub_region,
        transport_mode=location.transport_mode,
        max_distance=max_distance,
        distance_buckets=tuple(cfg.distance_buckets),
        region_multipliers=cfg.region_multipliers,
    )


def place_distance(place: Place, factors: LocationFactors) -> float | None:
    """Usable distance in meters, or None when unknown or malformed."""
    distance = place.distance
    if distance is None:
        if place.coordinates is not None and factors.coordinates is not None:
            return haversine_m(factors.coordinates, place.coordinates)
        return None
    if not math.isfinite(distance) or distance < 0:
        logger.warning("Ignoring malformed distance %r for place %s", distance, place.id)
        return None
    return float(distance)


def score_location(place: Place, factors: LocationFactors, *, settings: Settings | None = None) -> FactorResult:
    if not factors.has_location:
        return NEUTRAL
    acc = FactorAccumulator(settings or get_settings())

    distance = place_distance(place, factors)
    if distance is not None:
        bucket = factors.distance_bucket(distance)
        if bucket is not None:
            acc.apply(f"distance.{bucket.name}", bucket.multiplier)

    if factors.region and place.region:
        regions = factors.region_multipliers
        if place.region == factors.region:
            acc.apply("same_region", regions.same_region)
            if place.sub_region and factors.sub_region and place.sub_region == factors.sub_region:
                acc.apply("same_sub_region", regions.same_sub_region)
        else:
            acc.apply("different_region", regions.different_region)

    return acc.result()

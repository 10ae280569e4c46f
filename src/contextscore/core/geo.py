"""
Great-circle distance for the location scorer.

Callers normally send `place.distance` precomputed. When they don't, but both the user's
`LocationContext.coordinates` and the place's `coordinates` are known,
`features.location.place_distance` falls back to `haversine_m`. The result is in meters,
the same unit as the transport-mode max distances in `features.location`.
"""

from __future__ import annotations

from math import asin, cos, radians, sin, sqrt
from typing import Protocol

EARTH_RADIUS_M = 6_371_000


class HasLatLon(Protocol):
    lat: float
    lon: float


def haversine_m(origin: HasLatLon, target: HasLatLon) -> float:
    """Meters between two points given in decimal degrees."""
    phi1, phi2 = radians(origin.lat), radians(target.lat)
    dphi = phi2 - phi1
    dlmb = radians(target.lon - origin.lon)

    h = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))

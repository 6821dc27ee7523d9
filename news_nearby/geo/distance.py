"""Great-circle distance on a spherical Earth."""

from __future__ import annotations

import math

from news_nearby.common.constants import EARTH_RADIUS_M


def haversine(theta: float) -> float:
    return math.sin(theta / 2) ** 2


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in meters between two WGS84 points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2) - math.radians(lon1)

    a = haversine(d_phi) + math.cos(phi1) * math.cos(phi2) * haversine(d_lambda)
    # Rounding can push a a hair past 1 for antipodal points; NaN passes through.
    if a > 1.0:
        a = 1.0
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))

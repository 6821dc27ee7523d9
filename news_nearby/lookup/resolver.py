"""Nearest stored coordinate by linear scan."""

from __future__ import annotations

import math

from news_nearby.common.constants import COORDINATES_PARTITION
from news_nearby.common.errors import NoCandidatesError
from news_nearby.common.models import Coordinate, DistanceCandidate
from news_nearby.geo.distance import distance
from news_nearby.store.georecord_store import GeoRecordStore


class NearestResolver:
    def __init__(self, store: GeoRecordStore, partition: str = COORDINATES_PARTITION) -> None:
        self.store = store
        self.partition = partition

    def nearest_candidate(self, lat: float, lon: float) -> tuple[Coordinate, DistanceCandidate]:
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"Query point must be finite, got ({lat}, {lon})")
        best: Coordinate | None = None
        best_candidate = DistanceCandidate(key="", distance=math.inf)

        def _visit(key: str, value: object) -> None:
            nonlocal best, best_candidate
            coordinate = Coordinate.from_dict(value)
            d = distance(lat, lon, coordinate.lat, coordinate.lon)
            # Strict comparison: on equal distance the lower key, seen first, is kept.
            if d < best_candidate.distance:
                best = coordinate
                best_candidate = DistanceCandidate(key=key, distance=d)

        self.store.for_each(self.partition, _visit)

        if best is None:
            raise NoCandidatesError(f"No coordinates stored in partition {self.partition}")
        return best, best_candidate

    def find_nearest(self, lat: float, lon: float) -> Coordinate:
        coordinate, _candidate = self.nearest_candidate(lat, lon)
        return coordinate

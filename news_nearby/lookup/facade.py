"""Resolve a query point to the content record of its nearest suburb."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from news_nearby.common.constants import CONTENT_PARTITION, STATE_SUFFIXES
from news_nearby.common.models import ContentRecord, Coordinate
from news_nearby.lookup.resolver import NearestResolver
from news_nearby.store.georecord_store import GeoRecordStore

logger = logging.getLogger(__name__)


def sanitize_suburb_name(name: str) -> str:
    """Map a coordinate name such as ``"Bondi NSW"`` to its content key ``"Bondi"``.

    Only the first matching suffix in ``STATE_SUFFIXES`` is removed.
    """
    for suffix in STATE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


@dataclass(frozen=True)
class LookupResult:
    coordinate: Coordinate
    distance_m: float
    content_key: str
    record: ContentRecord


class LookupFacade:
    def __init__(
        self,
        store: GeoRecordStore,
        resolver: NearestResolver,
        content_partition: str = CONTENT_PARTITION,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.content_partition = content_partition

    def lookup(self, lat: float, lon: float) -> LookupResult:
        coordinate, candidate = self.resolver.nearest_candidate(lat, lon)
        content_key = sanitize_suburb_name(coordinate.name)
        logger.debug(
            "nearest suburb %s at %.1fm, content key %s",
            coordinate.name,
            candidate.distance,
            content_key,
        )
        record = ContentRecord.from_dict(self.store.get(self.content_partition, content_key))
        return LookupResult(
            coordinate=coordinate,
            distance_m=candidate.distance,
            content_key=content_key,
            record=record,
        )

    def resolve_content(self, lat: float, lon: float) -> ContentRecord:
        return self.lookup(lat, lon).record

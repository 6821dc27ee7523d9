import math
from pathlib import Path

import pytest

from news_nearby.common.errors import DeserializationError, NoCandidatesError
from news_nearby.common.models import Coordinate
from news_nearby.lookup.resolver import NearestResolver
from news_nearby.store.georecord_store import GeoRecordStore


@pytest.fixture
def store(tmp_path: Path):
    with GeoRecordStore(tmp_path / "records.db") as opened:
        yield opened


def _put(store, name, lat, lon):
    store.put("locations", name, Coordinate(name=name, lat=lat, lon=lon).to_dict())


@pytest.mark.parametrize("query", [(-33.88, 151.26), (51.5, -0.12), (0.0, 0.0), (89.9, 179.9)])
def test_single_coordinate_is_always_nearest(store, query):
    _put(store, "Bondi NSW", -33.89, 151.27)

    nearest = NearestResolver(store).find_nearest(*query)

    assert nearest == Coordinate(name="Bondi NSW", lat=-33.89, lon=151.27)


def test_empty_partition_raises_no_candidates(store):
    with pytest.raises(NoCandidatesError):
        NearestResolver(store).find_nearest(-33.88, 151.26)


def test_picks_minimum_distance(store):
    _put(store, "Bondi NSW", -33.89, 151.27)
    _put(store, "Manly NSW", -33.80, 151.29)
    _put(store, "Parramatta NSW", -33.815, 151.0011)

    assert NearestResolver(store).find_nearest(-33.80, 151.28).name == "Manly NSW"
    assert NearestResolver(store).find_nearest(-33.82, 151.01).name == "Parramatta NSW"


def test_exact_match_has_zero_distance(store):
    _put(store, "Bondi NSW", -33.89, 151.27)
    _put(store, "Manly NSW", -33.80, 151.29)

    coordinate, candidate = NearestResolver(store).nearest_candidate(-33.80, 151.29)

    assert coordinate.name == "Manly NSW"
    assert candidate.key == "Manly NSW"
    assert candidate.distance == 0


def test_tie_resolves_to_lowest_key(store):
    _put(store, "Zetland NSW", -33.90, 151.20)
    _put(store, "Alexandria NSW", -33.90, 151.20)

    nearest = NearestResolver(store).find_nearest(-33.95, 151.25)

    assert nearest.name == "Alexandria NSW"


def test_uses_configured_partition(store):
    store.put("other", "Hobart TAS", {"suburb": "Hobart TAS", "lat": -42.88, "lon": 147.33})

    assert NearestResolver(store, partition="other").find_nearest(0.0, 0.0).name == "Hobart TAS"
    with pytest.raises(NoCandidatesError):
        NearestResolver(store).find_nearest(0.0, 0.0)


@pytest.mark.parametrize("query", [(math.nan, 151.26), (-33.88, math.inf), (-math.inf, math.nan)])
def test_non_finite_query_is_rejected(store, query):
    _put(store, "Bondi NSW", -33.89, 151.27)

    with pytest.raises(ValueError):
        NearestResolver(store).find_nearest(*query)


def test_stored_coordinate_missing_fields_raises(store):
    store.put("locations", "Broken NSW", {"suburb": "Broken NSW"})

    with pytest.raises(DeserializationError):
        NearestResolver(store).find_nearest(-33.88, 151.26)

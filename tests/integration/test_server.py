from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote

import pytest
from fastapi.testclient import TestClient

from news_nearby.common.models import Coordinate
from news_nearby.lookup.facade import LookupFacade
from news_nearby.lookup.resolver import NearestResolver
from news_nearby.server.app import create_app
from news_nearby.store.georecord_store import GeoRecordStore


@pytest.fixture
def store(tmp_path: Path):
    with GeoRecordStore(tmp_path / "news_nearby.db") as opened:
        yield opened


def _client(store) -> TestClient:
    facade = LookupFacade(store, NearestResolver(store))
    return TestClient(create_app(facade, store))


def _seed(store):
    store.put("locations", "Bondi NSW", Coordinate("Bondi NSW", -33.89, 151.27).to_dict())
    store.put("locations", "Manly NSW", Coordinate("Manly NSW", -33.80, 151.29).to_dict())
    store.put(
        "suburbs",
        "Bondi",
        {"suburb": "Bondi", "state": "NSW", "postcode": "2026", "lat": -33.89, "lon": 151.27, "assets": []},
    )


@pytest.mark.integration
def test_lookup_returns_content_record(store):
    _seed(store)

    response = _client(store).get("/", params={"lat": -33.88, "lon": 151.26})

    assert response.status_code == 200
    assert response.json()["suburb"] == "Bondi"
    assert unquote(response.headers["X-Nearest-Suburb"]) == "Bondi NSW"
    assert float(response.headers["X-Nearest-Distance-M"]) > 0


@pytest.mark.integration
def test_missing_content_maps_to_404(store):
    _seed(store)

    response = _client(store).get("/", params={"lat": -33.80, "lon": 151.29})

    assert response.status_code == 404


@pytest.mark.integration
def test_empty_coordinates_maps_to_500(store):
    response = _client(store).get("/", params={"lat": -33.88, "lon": 151.26})

    assert response.status_code == 500


@pytest.mark.integration
def test_corrupt_content_maps_to_500(store):
    _seed(store)
    store.put_raw("suburbs", "Bondi", b"{broken")

    response = _client(store).get("/", params={"lat": -33.88, "lon": 151.26})

    assert response.status_code == 500


@pytest.mark.integration
@pytest.mark.parametrize("params", [{}, {"lat": "north", "lon": "151"}, {"lat": "-33.8"}])
def test_bad_query_parameters_map_to_422(store, params):
    _seed(store)

    assert _client(store).get("/", params=params).status_code == 422


@pytest.mark.integration
def test_health_reports_partition_counts(store):
    _seed(store)

    response = _client(store).get("/health")

    assert response.json() == {"status": "ok", "coordinates": 2, "content_records": 1}


@pytest.mark.integration
def test_non_latin1_suburb_name_is_percent_encoded(store):
    store.put("locations", "Ōcean NSW", Coordinate("Ōcean NSW", -33.80, 151.29).to_dict())
    store.put(
        "suburbs",
        "Ōcean",
        {"suburb": "Ōcean", "state": "NSW", "postcode": "2000", "lat": -33.80, "lon": 151.29, "assets": []},
    )

    response = _client(store).get("/", params={"lat": -33.80, "lon": 151.29})

    assert response.status_code == 200
    assert response.json()["suburb"] == "Ōcean"
    assert unquote(response.headers["X-Nearest-Suburb"]) == "Ōcean NSW"


@pytest.mark.integration
@pytest.mark.parametrize("params", [{"lat": "nan", "lon": "151.26"}, {"lat": "-33.88", "lon": "inf"}])
def test_non_finite_query_maps_to_422(store, params):
    _seed(store)

    assert _client(store).get("/", params=params).status_code == 422

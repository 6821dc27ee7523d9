import copy

import pytest

from news_nearby.common.errors import ConfigError
from news_nearby.common.schema import validate_service_config

BASE_SERVICE = {
    "store": {"path": "x.db", "coordinates_partition": "locations", "content_partition": "suburbs"},
    "ingest": {"coordinates_csv": "lat_lon.csv", "content_dir": "suburbs"},
    "server": {"host": "0.0.0.0", "port": 8080},
    "content_api": {
        "endpoint": "https://example.test",
        "connect_timeout_seconds": 1,
        "read_timeout_seconds": 1,
        "max_attempts": 1,
    },
}


def _config():
    return copy.deepcopy(BASE_SERVICE)


def test_validate_service_config_accepts_valid_shape():
    validated = validate_service_config(_config())
    assert validated["store"]["coordinates_partition"] == "locations"


def test_validate_service_config_rejects_unknown_key_by_default():
    bad = _config()
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_service_config(bad)


def test_validate_service_config_allows_unknown_when_enabled():
    okay = _config()
    okay["extra"] = 1
    okay["server"]["workers"] = 4
    validate_service_config(okay, allow_unknown=True)


def test_validate_service_config_requires_sections():
    bad = _config()
    del bad["ingest"]
    with pytest.raises(ConfigError, match="ingest"):
        validate_service_config(bad)


def test_validate_service_config_requires_section_keys():
    bad = _config()
    del bad["store"]["content_partition"]
    with pytest.raises(ConfigError, match="content_partition"):
        validate_service_config(bad)


@pytest.mark.parametrize("name", ["1locations", "loc-ations", "", "a b", 'x"; --'])
def test_validate_service_config_rejects_bad_partition_names(name):
    bad = _config()
    bad["store"]["coordinates_partition"] = name
    with pytest.raises(ConfigError):
        validate_service_config(bad)


def test_validate_service_config_rejects_shared_partition():
    bad = _config()
    bad["store"]["content_partition"] = "locations"
    with pytest.raises(ConfigError):
        validate_service_config(bad)


@pytest.mark.parametrize("port", [0, 70000, "8080", True])
def test_validate_service_config_rejects_bad_port(port):
    bad = _config()
    bad["server"]["port"] = port
    with pytest.raises(ConfigError):
        validate_service_config(bad)


def test_validate_service_config_rejects_non_mapping():
    with pytest.raises(ConfigError):
        validate_service_config(None)

"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

import re

from news_nearby.common.errors import ConfigError

PARTITION_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SECTIONS = {
    "store": {"path", "coordinates_partition", "content_partition"},
    "ingest": {"coordinates_csv", "content_dir"},
    "server": {"host", "port"},
    "content_api": {
        "endpoint",
        "connect_timeout_seconds",
        "read_timeout_seconds",
        "max_attempts",
    },
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def validate_service_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "service config")
    _assert_required_keys(cfg, set(_SECTIONS), "service config")
    _assert_no_unknown_keys(cfg, set(_SECTIONS), "service config", allow_unknown)

    for section, keys in _SECTIONS.items():
        _assert_mapping(cfg[section], section)
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    store = cfg["store"]
    for key in ("coordinates_partition", "content_partition"):
        if not PARTITION_NAME_RE.match(str(store[key])):
            raise ConfigError(f"store.{key} is not a valid partition name: {store[key]!r}")
    if store["coordinates_partition"] == store["content_partition"]:
        raise ConfigError("store.coordinates_partition and store.content_partition must differ")

    port = cfg["server"]["port"]
    if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
        raise ConfigError(f"server.port must be an integer in 1..65535, got {port!r}")

    attempts = cfg["content_api"]["max_attempts"]
    if not isinstance(attempts, int) or isinstance(attempts, bool) or attempts < 1:
        raise ConfigError("content_api.max_attempts must be a positive integer")

    return cfg

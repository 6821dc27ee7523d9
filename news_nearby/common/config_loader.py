"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from news_nearby.common.errors import ConfigError
from news_nearby.common.fs import read_yaml
from news_nearby.common.schema import validate_service_config

SERVICE_CONFIG_FILENAME = "service.yml"


@dataclass(frozen=True)
class StoreSettings:
    path: Path
    coordinates_partition: str
    content_partition: str


@dataclass(frozen=True)
class IngestSettings:
    coordinates_csv: Path
    content_dir: Path


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True)
class ContentApiSettings:
    endpoint: str
    connect_timeout_seconds: float
    read_timeout_seconds: float
    max_attempts: int


@dataclass(frozen=True)
class ServiceConfig:
    store: StoreSettings
    ingest: IngestSettings
    server: ServerSettings
    content_api: ContentApiSettings


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def _resolve(data_dir: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return data_dir / path


def build_service_config(cfg: dict, data_dir: Path) -> ServiceConfig:
    store = cfg["store"]
    ingest = cfg["ingest"]
    api = cfg["content_api"]
    return ServiceConfig(
        store=StoreSettings(
            path=_resolve(data_dir, store["path"]),
            coordinates_partition=store["coordinates_partition"],
            content_partition=store["content_partition"],
        ),
        ingest=IngestSettings(
            coordinates_csv=_resolve(data_dir, ingest["coordinates_csv"]),
            content_dir=_resolve(data_dir, ingest["content_dir"]),
        ),
        server=ServerSettings(host=str(cfg["server"]["host"]), port=int(cfg["server"]["port"])),
        content_api=ContentApiSettings(
            endpoint=str(api["endpoint"]),
            connect_timeout_seconds=float(api["connect_timeout_seconds"]),
            read_timeout_seconds=float(api["read_timeout_seconds"]),
            max_attempts=int(api["max_attempts"]),
        ),
    )


def load_service_config(
    config_dir: Path,
    data_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ServiceConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / SERVICE_CONFIG_FILENAME
    raw = _load_yaml_with_overlay(config_dir / SERVICE_CONFIG_FILENAME, overlay_path)
    validated = validate_service_config(raw, allow_unknown=allow_unknown)
    return build_service_config(validated, data_dir)

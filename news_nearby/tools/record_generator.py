"""Build a suburb content record file from assets held by the content API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from news_nearby.common.fs import write_json
from news_nearby.common.http import HttpClient, HttpRequestError
from news_nearby.common.logging import log_failure
from news_nearby.common.models import ContentRecord

module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuburbInfo:
    name: str
    state: str
    postcode: str
    lat: float
    lon: float


def asset_url(endpoint: str, asset_id: str) -> str:
    return f"{endpoint.rstrip('/')}/{asset_id}"


def split_asset_ids(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def output_path(directory: Path, name: str) -> Path:
    return directory / f"{name.lower()}.json"


def fetch_assets(
    client: HttpClient,
    endpoint: str,
    asset_ids: Iterable[str],
    logger: logging.Logger | None = None,
) -> list[dict[str, Any]]:
    """Fetch each asset in order, skipping ids the API cannot serve."""
    logger = logger or module_logger
    assets: list[dict[str, Any]] = []
    for asset_id in asset_ids:
        try:
            payload = client.get_json(asset_url(endpoint, asset_id))
        except HttpRequestError as exc:
            log_failure(
                logger,
                f"skipping asset {asset_id}: {exc}",
                stage="generate-record",
                key=asset_id,
                event="ASSET_SKIPPED",
                error_code=exc.error_code,
            )
            continue
        if not isinstance(payload, dict):
            log_failure(
                logger,
                f"skipping asset {asset_id}: payload is not an object",
                stage="generate-record",
                key=asset_id,
                event="ASSET_SKIPPED",
                error_code="HTTP_ERROR",
            )
            continue
        assets.append(payload)
    return assets


def write_record(directory: Path, info: SuburbInfo, assets: list[dict[str, Any]]) -> Path:
    record = ContentRecord(
        name=info.name,
        state=info.state,
        postcode=info.postcode,
        lat=info.lat,
        lon=info.lon,
        assets=assets,
    )
    path = output_path(directory, info.name)
    write_json(path, record.to_dict())
    return path


def generate_record(
    client: HttpClient,
    directory: Path,
    endpoint: str,
    info: SuburbInfo,
    asset_ids: Iterable[str],
    logger: logging.Logger | None = None,
) -> Path:
    assets = fetch_assets(client, endpoint, asset_ids, logger)
    return write_record(directory, info, assets)

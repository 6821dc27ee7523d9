"""Load-phase orchestration with fail-soft semantics."""

from __future__ import annotations

import csv
import logging

from news_nearby.common.config_loader import ServiceConfig
from news_nearby.common.logging import log_failure
from news_nearby.ingest.content_dir import load_content_records
from news_nearby.ingest.coordinates_csv import load_coordinates, parse_geo_csv
from news_nearby.store.georecord_store import GeoRecordStore


def run_load(
    store: GeoRecordStore,
    config: ServiceConfig,
    logger: logging.Logger,
    run_id: str | None = None,
) -> dict:
    failures: list[str] = []
    results: dict[str, dict] = {}

    csv_path = config.ingest.coordinates_csv
    try:
        results["coordinates"] = load_coordinates(
            store,
            parse_geo_csv(csv_path),
            logger,
            partition=config.store.coordinates_partition,
            run_id=run_id,
        )
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        failures.append("coordinates")
        log_failure(
            logger,
            f"could not read coordinates csv {csv_path}: {exc}",
            run_id=run_id,
            stage="load-coordinates",
            partition=config.store.coordinates_partition,
            event="SOURCE_FAILED",
            error_code="IO_ERROR",
        )

    content_dir = config.ingest.content_dir
    if content_dir.is_dir():
        results["content"] = load_content_records(
            store,
            content_dir,
            logger,
            partition=config.store.content_partition,
            run_id=run_id,
        )
    else:
        failures.append("content")
        log_failure(
            logger,
            f"content directory not found: {content_dir}",
            run_id=run_id,
            stage="load-content",
            partition=config.store.content_partition,
            event="SOURCE_FAILED",
            error_code="IO_ERROR",
        )

    skipped = sum(result["failed"] for result in results.values())
    return {
        "run_id": run_id,
        "results": results,
        "failed_sources": failures,
        "partial": bool(failures or skipped),
    }

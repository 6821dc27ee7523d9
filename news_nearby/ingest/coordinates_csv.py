"""Coordinate CSV ingestion with per-row fail-soft semantics."""

from __future__ import annotations

import csv
import logging
import math
import time
from pathlib import Path
from typing import Iterable, Iterator

from news_nearby.common.constants import COORDINATES_PARTITION
from news_nearby.common.errors import StorageWriteError
from news_nearby.common.logging import log_event, log_failure
from news_nearby.common.models import Coordinate
from news_nearby.common.time_utils import elapsed_ms
from news_nearby.store.georecord_store import GeoRecordStore

module_logger = logging.getLogger(__name__)


def _safe_float(value: str) -> float | None:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    # "nan" and "inf" parse but cannot be measured against.
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_geo_rows(rows: Iterable[list[str]]) -> Iterator[tuple[str, float, float]]:
    """Yield ``(name, lat, lon)`` from rows of at least three columns.

    Rows that are too short or whose coordinates do not parse (a header row,
    for instance) are skipped.
    """
    for line_no, row in enumerate(rows, start=1):
        if len(row) < 3:
            module_logger.debug("skipping short row %d", line_no)
            continue
        lat = _safe_float(row[1])
        lon = _safe_float(row[2])
        if lat is None or lon is None:
            module_logger.debug("skipping row %d with non-numeric coordinates", line_no)
            continue
        yield row[0].strip(), lat, lon


def parse_geo_csv(path: Path) -> Iterator[tuple[str, float, float]]:
    with path.open("r", encoding="utf-8", newline="") as f:
        yield from parse_geo_rows(csv.reader(f))


def load_coordinates(
    store: GeoRecordStore,
    rows: Iterable[tuple[str, float, float]],
    logger: logging.Logger,
    *,
    partition: str = COORDINATES_PARTITION,
    run_id: str | None = None,
) -> dict[str, int]:
    started = time.monotonic()
    rows_in = 0
    rows_out = 0
    failed = 0

    for name, lat, lon in rows:
        rows_in += 1
        coordinate = Coordinate(name=name, lat=lat, lon=lon)
        try:
            store.put(partition, coordinate.name, coordinate.to_dict())
        except StorageWriteError as exc:
            failed += 1
            log_failure(
                logger,
                f"skipping coordinate {name}: {exc}",
                run_id=run_id,
                stage="load-coordinates",
                partition=partition,
                key=name,
                event="RECORD_SKIPPED",
                error_code=exc.error_code,
            )
            continue
        rows_out += 1

    log_event(
        logger,
        "coordinates loaded",
        run_id=run_id,
        stage="load-coordinates",
        partition=partition,
        event="LOAD_END",
        status="partial" if failed else "ok",
        rows_in=rows_in,
        rows_out=rows_out,
        duration_ms=elapsed_ms(started),
    )
    return {"rows_in": rows_in, "rows_out": rows_out, "failed": failed}

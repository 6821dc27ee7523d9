"""Content record ingestion from a directory of per-suburb JSON files."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from news_nearby.common.constants import CONTENT_PARTITION
from news_nearby.common.errors import StorageWriteError
from news_nearby.common.logging import log_event, log_failure
from news_nearby.common.time_utils import elapsed_ms
from news_nearby.store.georecord_store import GeoRecordStore

CONTENT_SUFFIX = ".json"


def content_key_from_filename(filename: str) -> str:
    """``"bondi.json"`` -> ``"Bondi"``: extension stripped, first letter upper-cased."""
    stem = Path(filename).stem
    if not stem:
        return stem
    return stem[0].upper() + stem[1:]


def load_content_records(
    store: GeoRecordStore,
    directory: Path,
    logger: logging.Logger,
    *,
    partition: str = CONTENT_PARTITION,
    run_id: str | None = None,
) -> dict[str, int]:
    """Store each ``*.json`` file under ``directory`` verbatim.

    Payloads are not parsed here; a corrupt file surfaces as a
    DeserializationError on lookup.
    """
    started = time.monotonic()
    rows_in = 0
    rows_out = 0
    failed = 0

    for path in sorted(directory.glob(f"*{CONTENT_SUFFIX}")):
        if not path.is_file():
            continue
        rows_in += 1
        key = content_key_from_filename(path.name)
        try:
            payload = path.read_bytes()
            store.put_raw(partition, key, payload)
        except (OSError, StorageWriteError) as exc:
            failed += 1
            log_failure(
                logger,
                f"skipping content file {path.name}: {exc}",
                run_id=run_id,
                stage="load-content",
                partition=partition,
                key=key,
                event="RECORD_SKIPPED",
                error_code=getattr(exc, "error_code", "IO_ERROR"),
            )
            continue
        rows_out += 1

    log_event(
        logger,
        "content records loaded",
        run_id=run_id,
        stage="load-content",
        partition=partition,
        event="LOAD_END",
        status="partial" if failed else "ok",
        rows_in=rows_in,
        rows_out=rows_out,
        duration_ms=elapsed_ms(started),
    )
    return {"rows_in": rows_in, "rows_out": rows_out, "failed": failed}

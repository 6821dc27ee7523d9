import json
import logging
from pathlib import Path

from news_nearby.common.ids import generate_run_id
from news_nearby.common.logging import JsonLineFormatter, build_logger, log_event


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("nearby-")
    assert generate_run_id("lookup").startswith("nearby-lookup-")


def test_json_formatter_emits_stable_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "loaded %d", (3,), None)
    record.partition = "locations"
    record.rows_out = 3

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "loaded 3"
    assert payload["partition"] == "locations"
    assert payload["rows_out"] == 3
    assert payload["error_code"] is None
    assert "timestamp" in payload


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-test", data_dir=tmp_path)
    log_event(logger, "hello", run_id="run-test", event="TEST", status="ok")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run_meta" / "run-test.log.jsonl").read_text(encoding="utf-8").splitlines()

    assert json.loads(lines[-1])["event"] == "TEST"

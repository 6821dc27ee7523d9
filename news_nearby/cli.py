"""CLI entrypoint for the nearest-suburb content service."""

from __future__ import annotations

import argparse
import json
import math
import os
import sys
from dataclasses import replace
from pathlib import Path

from news_nearby.common.config_loader import ServiceConfig, load_service_config
from news_nearby.common.constants import (
    COMMANDS,
    CONTENT_API_ENDPOINT,
    DEFAULT_PORT,
    EXIT_HARD_FAIL,
    EXIT_NOT_FOUND,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
)
from news_nearby.common.errors import NearbyError, NoCandidatesError, NotFoundError
from news_nearby.common.http import HttpClient, RetryConfig, TimeoutConfig
from news_nearby.common.ids import generate_run_id
from news_nearby.common.logging import build_logger, log_event
from news_nearby.ingest.runner import run_load
from news_nearby.lookup.facade import LookupFacade
from news_nearby.lookup.resolver import NearestResolver
from news_nearby.store.georecord_store import GeoRecordStore
from news_nearby.tools.record_generator import SuburbInfo, generate_record, split_asset_ids


def finite_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if not math.isfinite(parsed):
        raise argparse.ArgumentTypeError(f"must be a finite number: {value!r}")
    return parsed


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])

    load = parser.add_argument_group("load")
    load.add_argument("--csv", default=None, help="coordinates csv, overrides ingest.coordinates_csv")
    load.add_argument("--content-dir", default=None, help="overrides ingest.content_dir")

    lookup = parser.add_argument_group("lookup / generate-record")
    lookup.add_argument("--lat", type=finite_float, default=None, help="latitude (in decimal format)")
    lookup.add_argument("--lon", type=finite_float, default=None, help="longitude (in decimal format)")

    serve = parser.add_argument_group("serve")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--skip-load", action="store_true", help="serve the store as-is")

    generate = parser.add_argument_group("generate-record")
    generate.add_argument("--path", default="/tmp", help="directory for the output file")
    generate.add_argument("--endpoint", default=None, help=f"content API, default {CONTENT_API_ENDPOINT}")
    generate.add_argument("--suburb", default="", help="suburb, e.g. Pyrmont, Bondi, etc.")
    generate.add_argument("--state", default="", help="state, e.g. NSW, VIC, etc.")
    generate.add_argument("--postcode", default="", help="postcode, e.g. 2009, 2033, etc.")
    generate.add_argument("--asset-ids", default="", help="comma separated list of asset IDs")
    return parser.parse_args(argv)


def _with_overrides(config: ServiceConfig, args: argparse.Namespace) -> ServiceConfig:
    ingest = config.ingest
    if args.csv:
        ingest = replace(ingest, coordinates_csv=Path(args.csv))
    if args.content_dir:
        ingest = replace(ingest, content_dir=Path(args.content_dir))
    return replace(config, ingest=ingest)


def resolve_port(args: argparse.Namespace, config: ServiceConfig) -> int:
    if args.port is not None:
        return args.port
    env_port = os.environ.get("PORT")
    if env_port:
        return int(env_port)
    return config.server.port or DEFAULT_PORT


def _build_facade(store: GeoRecordStore, config: ServiceConfig) -> LookupFacade:
    resolver = NearestResolver(store, partition=config.store.coordinates_partition)
    return LookupFacade(store, resolver, content_partition=config.store.content_partition)


def _command_load(args, config: ServiceConfig, logger, run_id: str) -> int:
    with GeoRecordStore(config.store.path) as store:
        summary = run_load(store, config, logger, run_id=run_id)
    return EXIT_PARTIAL if summary["partial"] else EXIT_SUCCESS


def _command_lookup(args, config: ServiceConfig, logger, run_id: str) -> int:
    if args.lat is None or args.lon is None:
        raise SystemExit("lookup requires --lat and --lon")
    with GeoRecordStore(config.store.path) as store:
        facade = _build_facade(store, config)
        try:
            result = facade.lookup(args.lat, args.lon)
        except NotFoundError as exc:
            log_event(logger, str(exc), run_id=run_id, stage="lookup", event="NO_CONTENT", status="not_found")
            return EXIT_NOT_FOUND
    log_event(
        logger,
        f"nearest suburb {result.coordinate.name}",
        run_id=run_id,
        stage="lookup",
        key=result.content_key,
        event="LOOKUP_END",
        status="ok",
    )
    print(json.dumps(result.record.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_SUCCESS


def _command_serve(args, config: ServiceConfig, logger, run_id: str) -> int:
    import uvicorn

    from news_nearby.server.app import create_app

    port = resolve_port(args, config)
    host = args.host or config.server.host
    with GeoRecordStore(config.store.path) as store:
        if not args.skip_load:
            run_load(store, config, logger, run_id=run_id)
        app = create_app(_build_facade(store, config), store)
        log_event(logger, f"listening on {host}:{port}", run_id=run_id, stage="serve", event="SERVE_START", status="ok")
        uvicorn.run(app, host=host, port=port, log_level=args.log_level.lower().replace("warn", "warning"))
    return EXIT_SUCCESS


def _command_generate_record(args, config: ServiceConfig, logger, run_id: str) -> int:
    endpoint = args.endpoint or config.content_api.endpoint
    info = SuburbInfo(
        name=args.suburb,
        state=args.state,
        postcode=args.postcode,
        lat=args.lat or 0.0,
        lon=args.lon or 0.0,
    )
    timeout = TimeoutConfig(
        connect=config.content_api.connect_timeout_seconds,
        read=config.content_api.read_timeout_seconds,
    )
    with HttpClient(timeout=timeout, retry=RetryConfig(max_attempts=config.content_api.max_attempts)) as client:
        path = generate_record(client, Path(args.path), endpoint, info, split_asset_ids(args.asset_ids), logger)
    log_event(
        logger,
        f"record created for {info.name} at {path}",
        run_id=run_id,
        stage="generate-record",
        key=info.name,
        event="RECORD_WRITTEN",
        status="ok",
    )
    return EXIT_SUCCESS


COMMAND_HANDLERS = {
    "load": _command_load,
    "lookup": _command_lookup,
    "serve": _command_serve,
    "generate-record": _command_generate_record,
}


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id(args.command)
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    config = load_service_config(Path(args.config_dir), data_dir, overlay_config_dir=overlay_config_dir)
    config = _with_overrides(config, args)

    log_event(logger, "command start", run_id=run_id, stage=args.command, event="COMMAND_START", status="ok")
    try:
        return COMMAND_HANDLERS[args.command](args, config, logger, run_id)
    except NoCandidatesError as exc:
        log_event(
            logger,
            str(exc),
            run_id=run_id,
            stage=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except NearbyError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())

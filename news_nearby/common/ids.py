"""Run identifiers for log correlation."""

from __future__ import annotations

from datetime import datetime, timezone

RUN_ID_PREFIX = "nearby"


def generate_run_id(command: str | None = None) -> str:
    """``nearby-lookup-20261019T120000000000Z``; sorts by start time within a command."""
    stamp = datetime.now(tz=timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    if command:
        return f"{RUN_ID_PREFIX}-{command}-{stamp}"
    return f"{RUN_ID_PREFIX}-{stamp}"

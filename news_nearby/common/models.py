"""Records held in the two store partitions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from news_nearby.common.errors import DeserializationError


def _require(payload: dict, key: str, ctx: str):
    if key not in payload:
        raise DeserializationError(f"{ctx} is missing required key {key!r}")
    return payload[key]


def _as_float(payload: dict, key: str, ctx: str) -> float:
    value = _require(payload, key, ctx)
    if isinstance(value, bool):
        raise DeserializationError(f"{ctx}.{key} must be a number, got bool")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise DeserializationError(f"{ctx}.{key} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise DeserializationError(f"{ctx}.{key} must be finite, got {value!r}")
    return number


def _as_str(payload: dict, key: str, ctx: str) -> str:
    value = _require(payload, key, ctx)
    if not isinstance(value, str):
        raise DeserializationError(f"{ctx}.{key} must be a string, got {type(value).__name__}")
    return value


def _require_mapping(payload: Any, ctx: str) -> dict:
    if not isinstance(payload, dict):
        raise DeserializationError(f"{ctx} must be a JSON object, got {type(payload).__name__}")
    return payload


@dataclass(frozen=True)
class Coordinate:
    name: str
    lat: float
    lon: float

    def to_dict(self) -> dict[str, Any]:
        return {"suburb": self.name, "lat": self.lat, "lon": self.lon}

    @classmethod
    def from_dict(cls, payload: Any) -> "Coordinate":
        data = _require_mapping(payload, "coordinate")
        return cls(
            name=_as_str(data, "suburb", "coordinate"),
            lat=_as_float(data, "lat", "coordinate"),
            lon=_as_float(data, "lon", "coordinate"),
        )


@dataclass(frozen=True)
class ContentRecord:
    """Suburb details plus the content assets published for it.

    Assets are kept as the raw JSON objects returned by the content API.
    """

    name: str
    state: str
    postcode: str
    lat: float
    lon: float
    assets: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suburb": self.name,
            "state": self.state,
            "postcode": self.postcode,
            "lat": self.lat,
            "lon": self.lon,
            "assets": list(self.assets),
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "ContentRecord":
        data = _require_mapping(payload, "content record")
        assets = data.get("assets")
        if assets is None:
            assets = []
        if not isinstance(assets, list):
            raise DeserializationError(f"content record.assets must be a list, got {type(assets).__name__}")
        return cls(
            name=_as_str(data, "suburb", "content record"),
            state=_as_str(data, "state", "content record"),
            postcode=_as_str(data, "postcode", "content record"),
            lat=_as_float(data, "lat", "content record"),
            lon=_as_float(data, "lon", "content record"),
            assets=assets,
        )


@dataclass(frozen=True)
class DistanceCandidate:
    key: str
    distance: float

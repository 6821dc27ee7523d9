"""HTTP boundary for suburb content lookups.

Endpoints:
    GET /?lat=..&lon=..  Content record of the suburb nearest the point
    GET /health          Partition counts

Run through the CLI:
    python -m news_nearby.cli serve
"""

from __future__ import annotations

import logging
import math
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from news_nearby.common.errors import DeserializationError, NoCandidatesError, NotFoundError
from news_nearby.lookup.facade import LookupFacade
from news_nearby.store.georecord_store import GeoRecordStore

logger = logging.getLogger(__name__)


def create_app(facade: LookupFacade, store: GeoRecordStore) -> FastAPI:
    app = FastAPI(title="news-nearby", docs_url=None, redoc_url=None)
    app.state.facade = facade
    app.state.store = store

    @app.get("/")
    def nearest_content(
        request: Request,
        lat: float = Query(..., description="Latitude in decimal degrees"),
        lon: float = Query(..., description="Longitude in decimal degrees"),
    ):
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise HTTPException(status_code=422, detail="lat and lon must be finite numbers")
        facade: LookupFacade = request.app.state.facade
        try:
            result = facade.lookup(lat, lon)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except NoCandidatesError as exc:
            logger.error("lookup with empty coordinate partition: %s", exc)
            raise HTTPException(status_code=500, detail="No locations loaded") from exc
        except DeserializationError as exc:
            logger.error("corrupt record during lookup: %s", exc)
            raise HTTPException(status_code=500, detail="Stored record is unreadable") from exc

        return JSONResponse(
            content=result.record.to_dict(),
            headers={
                # Header values are latin-1 on the wire.
                "X-Nearest-Suburb": quote(result.coordinate.name),
                "X-Nearest-Distance-M": f"{result.distance_m:.1f}",
            },
        )

    @app.get("/health")
    def health(request: Request):
        store: GeoRecordStore = request.app.state.store
        facade: LookupFacade = request.app.state.facade
        return {
            "status": "ok",
            "coordinates": store.count(facade.resolver.partition),
            "content_records": store.count(facade.content_partition),
        }

    return app

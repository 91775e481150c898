"""FastAPI REST backend for the wayfinder navigation engine."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wayfinder.cache.redis_client import redis_healthy
from wayfinder.config import settings
from wayfinder.core.address import AddressResolver
from wayfinder.core.destination import DestinationResolver
from wayfinder.core.errors import (
    DestinationNotFound,
    GeocodingUnavailable,
    LocationDenied,
    LocationError,
    WayfinderError,
)
from wayfinder.core.models import AddressResolution, Coordinate, RouteInfo, TransportMode
from wayfinder.core.routing import RouteProviderAdapter
from wayfinder.deps import get_providers, get_sessions
from wayfinder.logs import configure_logging
from wayfinder.routers import sessions

configure_logging(settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="Wayfinder", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions.router)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def _status_for(exc: WayfinderError) -> int:
    if isinstance(exc, LocationDenied):
        return 403
    if isinstance(exc, LocationError):
        return 503
    if isinstance(exc, DestinationNotFound):
        return 404
    if isinstance(exc, GeocodingUnavailable):
        return 502
    return 500


@app.exception_handler(WayfinderError)
async def wayfinder_error_handler(request: Request, exc: WayfinderError):
    status = _status_for(exc)
    if status >= 500:
        log.warning("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class AddressRequest(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    accuracy_m: Optional[float] = Field(default=None, ge=0.0)


class RouteRequest(BaseModel):
    start: Coordinate
    end: Coordinate
    mode: TransportMode = TransportMode.CAR
    destination_label: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {
        "status": "ok",
        "providers": settings.providers,
        "routing_key": bool(settings.ors_api_key),
        "redis": redis_healthy(),
        "sessions": len(get_sessions()),
    }


@app.post("/address", response_model=AddressResolution)
def resolve_address(req: AddressRequest, providers=Depends(get_providers)):
    geocoder, _ = providers
    coordinate = Coordinate(lat=req.lat, lon=req.lon)
    return AddressResolver(geocoder).resolve(coordinate, req.accuracy_m)


@app.get("/geocode", response_model=Coordinate)
def geocode(q: str, providers=Depends(get_providers)):
    geocoder, _ = providers
    coordinate = DestinationResolver(geocoder).resolve_text(q)
    if coordinate is None:
        raise HTTPException(status_code=404, detail="Destination not found")
    return coordinate


@app.post("/route", response_model=RouteInfo)
def route(req: RouteRequest, providers=Depends(get_providers)):
    _, routing = providers
    return RouteProviderAdapter(routing).compute_route(
        req.start, req.end, req.mode, destination_label=req.destination_label
    )

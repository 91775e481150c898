"""Navigation sessions: one per navigation screen, held in memory."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from wayfinder.core.display import format_distance, format_duration
from wayfinder.core.engine import Navigator
from wayfinder.core.models import (
    AddressResolution,
    Coordinate,
    LocationObservation,
    RouteInfo,
    RouteStep,
    TransportMode,
)
from wayfinder.deps import SessionStore, get_providers, get_sessions

router = APIRouter(prefix="/sessions", tags=["sessions"])


class SessionCreated(BaseModel):
    session_id: str


class LocationIn(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    accuracy_m: Optional[float] = Field(default=None, ge=0.0)


class NavigateIn(BaseModel):
    destination: str = Field(..., min_length=1)
    mode: TransportMode = TransportMode.CAR
    # omitted -> last location reported to this session
    origin: Optional[Coordinate] = None


class SessionOut(BaseModel):
    session_id: str
    state: str
    current_step_index: int
    current_step: Optional[RouteStep] = None
    route: Optional[RouteInfo] = None
    distance_text: Optional[str] = None
    duration_text: Optional[str] = None


class NavigateOut(SessionOut):
    destination: Coordinate
    applied: bool


def _session_out(session_id: str, nav: Navigator) -> dict:
    route, index = nav.session.snapshot()
    return {
        "session_id": session_id,
        "state": "idle" if route is None else "routed",
        "current_step_index": index,
        "current_step": route.steps[index] if route and route.steps else None,
        "route": route,
        "distance_text": format_distance(route.total_distance_m) if route else None,
        "duration_text": format_duration(route.total_duration_s) if route else None,
    }


@router.post("", response_model=SessionCreated, status_code=201)
def create_session(
    providers=Depends(get_providers),
    store: SessionStore = Depends(get_sessions),
):
    geocoder, routing = providers
    return SessionCreated(session_id=store.create(geocoder, routing))


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str, store: SessionStore = Depends(get_sessions)):
    return _session_out(session_id, store.get(session_id))


@router.post("/{session_id}/location", response_model=AddressResolution)
def report_location(session_id: str, body: LocationIn, store: SessionStore = Depends(get_sessions)):
    nav = store.get(session_id)
    obs = LocationObservation(
        coordinate=Coordinate(lat=body.lat, lon=body.lon),
        accuracy_m=body.accuracy_m,
    )
    nav.observe(obs)
    return nav.describe(obs)


@router.post("/{session_id}/navigate", response_model=NavigateOut)
def navigate(session_id: str, body: NavigateIn, store: SessionStore = Depends(get_sessions)):
    nav = store.get(session_id)
    result = nav.navigate(body.destination, body.mode, origin=body.origin)
    return {
        **_session_out(session_id, nav),
        "destination": result.destination,
        "applied": result.applied,
    }


@router.post("/{session_id}/advance", response_model=SessionOut)
def advance(session_id: str, store: SessionStore = Depends(get_sessions)):
    nav = store.get(session_id)
    nav.session.advance()
    return _session_out(session_id, nav)


@router.post("/{session_id}/retreat", response_model=SessionOut)
def retreat(session_id: str, store: SessionStore = Depends(get_sessions)):
    nav = store.get(session_id)
    nav.session.retreat()
    return _session_out(session_id, nav)


@router.delete("/{session_id}", status_code=204)
def close_session(session_id: str, store: SessionStore = Depends(get_sessions)):
    if not store.drop(session_id):
        raise HTTPException(status_code=404, detail="Navigation session not found")
    return None

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

import requests

from wayfinder.config import settings
from wayfinder.core.errors import RoutingUnavailable
from wayfinder.core.models import Coordinate, RouteInfo, RouteStep
from wayfinder.providers.base import RoutingProvider
from wayfinder.providers.http import HTTPClient

log = logging.getLogger(__name__)


def parse_directions(data: Any) -> RouteInfo:
    """
    Parse an OpenRouteService GeoJSON directions response.

    Totals come from ``properties.summary``; steps are flattened across every
    segment in order; geometry arrives as ``[lon, lat]`` pairs.
    """
    if not isinstance(data, dict) or not data.get("features"):
        raise RoutingUnavailable("No route found")

    try:
        feature = data["features"][0]
        props = feature.get("properties") or {}
        summary = props.get("summary") or {}

        steps: List[RouteStep] = []
        for segment in props.get("segments") or []:
            for step in segment.get("steps") or []:
                steps.append(
                    RouteStep(
                        distance_m=float(step.get("distance") or 0.0),
                        duration_s=float(step.get("duration") or 0.0),
                        instruction=step.get("instruction") or "Continue",
                        maneuver_type=int(step.get("type") or 0),
                    )
                )

        coords = (feature.get("geometry") or {}).get("coordinates") or []
        geometry = [Coordinate.from_lon_lat(pair) for pair in coords]

        return RouteInfo(
            total_distance_m=float(summary.get("distance") or 0.0),
            total_duration_s=float(summary.get("duration") or 0.0),
            steps=steps,
            geometry=geometry,
            source="provider",
        )
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise RoutingUnavailable(f"Malformed directions response: {type(e).__name__}: {e}") from e


@dataclass
class OpenRouteServiceRouter(RoutingProvider):
    """OpenRouteService ``/v2/directions/{profile}`` (GET, api_key in the query)."""

    base_url: str = field(default_factory=lambda: settings.ors_url)
    api_key: str = field(default_factory=lambda: settings.ors_api_key)
    http: Any = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.http is None:
            self.http = HTTPClient(
                user_agent=settings.user_agent,
                timeout_s=settings.http_timeout_s,
                tries=settings.http_tries,
                backoff_s=settings.http_backoff_s,
            )

    def directions(self, start: Coordinate, end: Coordinate, profile: str) -> RouteInfo:
        if not self.api_key:
            raise RoutingUnavailable("No OpenRouteService API key configured")

        url = f"{self.base_url}/v2/directions/{profile}"
        params = {
            "api_key": self.api_key,
            "start": f"{start.lon},{start.lat}",
            "end": f"{end.lon},{end.lat}",
        }
        try:
            data = self.http.get_json(url, params=params)
        except (requests.RequestException, ValueError) as e:
            raise RoutingUnavailable(f"{type(e).__name__}: {e}") from e

        return parse_directions(data)

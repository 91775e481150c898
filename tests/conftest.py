import math
from typing import Dict, List, Optional, Tuple

import pytest
import requests

from wayfinder.core.errors import RoutingUnavailable
from wayfinder.core.models import Coordinate, ReverseMatch, RouteInfo, RouteStep
from wayfinder.providers.base import GeocodingProvider, RoutingProvider

SINGAPORE = Coordinate(lat=1.3521, lon=103.8198)


def offset_north(c: Coordinate, meters: float) -> Coordinate:
    """Point *meters* due north of *c* (exact on the Haversine sphere)."""
    return Coordinate(lat=c.lat + math.degrees(meters / 6_371_000.0), lon=c.lon)


class FakeGeocoder(GeocodingProvider):
    """Scripted geocoder: reverse answers keyed by (zoom, layer)."""

    def __init__(self, reverse: Optional[Dict[Tuple[int, Optional[str]], object]] = None,
                 places: Optional[Dict[str, Coordinate]] = None):
        self.reverse_answers = reverse or {}
        self.places = places or {}
        self.reverse_calls: List[Tuple[int, Optional[str]]] = []
        self.search_calls: List[str] = []

    def reverse(self, coordinate, zoom, layer=None):
        self.reverse_calls.append((zoom, layer))
        answer = self.reverse_answers.get((zoom, layer))
        if isinstance(answer, Exception):
            raise answer
        return answer

    def search(self, query):
        self.search_calls.append(query)
        answer = self.places.get(query)
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeRouter(RoutingProvider):
    def __init__(self, route: Optional[RouteInfo] = None, fail: bool = False):
        self.route = route
        self.fail = fail
        self.calls: List[Tuple[Coordinate, Coordinate, str]] = []

    def directions(self, start, end, profile):
        self.calls.append((start, end, profile))
        if self.fail or self.route is None:
            raise RoutingUnavailable("offline")
        return self.route


class FakeHTTP:
    """Stands in for HTTPClient: returns queued payloads or raises queued errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: List[Tuple[str, dict]] = []

    def get_json(self, url, params=None, timeout_s=None):
        self.calls.append((url, dict(params or {})))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeResponse:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self.payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        item = self.results.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_route(n_steps: int = 3) -> RouteInfo:
    return RouteInfo(
        total_distance_m=100.0 * n_steps,
        total_duration_s=20.0 * n_steps,
        steps=[
            RouteStep(distance_m=100.0, duration_s=20.0, instruction=f"step {i}", maneuver_type=i)
            for i in range(n_steps)
        ],
        geometry=[SINGAPORE, offset_north(SINGAPORE, 300)],
    )


def reverse_match(coordinate: Optional[Coordinate], display_name: Optional[str] = None, **address) -> ReverseMatch:
    return ReverseMatch(display_name=display_name, address=address, coordinate=coordinate)


@pytest.fixture
def singapore():
    return SINGAPORE

from __future__ import annotations

from typing import Dict, Optional

from wayfinder.core.errors import RoutingUnavailable
from wayfinder.core.geo import bearing_deg, bearing_to_compass, haversine_m
from wayfinder.core.models import Coordinate, ReverseMatch, RouteInfo, RouteStep
from wayfinder.providers.base import GeocodingProvider, RoutingProvider

GAZETTEER: Dict[str, Coordinate] = {
    "orchard road": Coordinate(lat=1.3048, lon=103.8318),
    "marina bay sands": Coordinate(lat=1.2834, lon=103.8607),
    "changi airport": Coordinate(lat=1.3644, lon=103.9915),
    "jurong east": Coordinate(lat=1.3331, lon=103.7422),
}


class MockGeocoder(GeocodingProvider):
    """
    Deterministic fake geocoder so the pipeline runs end-to-end without APIs.
    Reverse lookups echo the requested coordinate; forward lookups use a
    small Singapore gazetteer.
    """

    def reverse(self, coordinate: Coordinate, zoom: int, layer: Optional[str] = None) -> Optional[ReverseMatch]:
        address = {"road": "Orchard Road", "city": "Singapore", "country": "Singapore"}
        if zoom >= 18:
            address["house_number"] = str(int(abs(coordinate.lat * 1000)) % 400 + 1)
        return ReverseMatch(
            display_name=f"{address.get('house_number', '')} Orchard Road, Singapore".strip(),
            address=address,
            coordinate=coordinate,
        )

    def search(self, query: str) -> Optional[Coordinate]:
        return GAZETTEER.get(" ".join(query.lower().split()))


class MockRouter(RoutingProvider):
    """Three-step route via the midpoint; ``fail=True`` simulates an outage."""

    def __init__(self, fail: bool = False):
        self.fail = fail

    def directions(self, start: Coordinate, end: Coordinate, profile: str) -> RouteInfo:
        if self.fail:
            raise RoutingUnavailable("mock router offline")

        mid = Coordinate(lat=(start.lat + end.lat) / 2, lon=(start.lon + end.lon) / 2)
        # road detour factor so mock routes are distinguishable from fallback ones
        leg1 = haversine_m(start, mid) * 1.3
        leg2 = haversine_m(mid, end) * 1.3
        speed_ms = 8.0 if profile == "driving-car" else 6.0
        heading = bearing_to_compass(bearing_deg(start, end))

        steps = [
            RouteStep(distance_m=leg1, duration_s=leg1 / speed_ms,
                      instruction=f"Head {heading}", maneuver_type=11),
            RouteStep(distance_m=leg2, duration_s=leg2 / speed_ms,
                      instruction="Continue straight", maneuver_type=6),
            RouteStep(distance_m=0.0, duration_s=0.0,
                      instruction="Arrive at your destination", maneuver_type=10),
        ]
        return RouteInfo(
            total_distance_m=leg1 + leg2,
            total_duration_s=(leg1 + leg2) / speed_ms,
            steps=steps,
            geometry=[start, mid, end],
            source="provider",
        )

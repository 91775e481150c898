"""Straight-line route used whenever the routing provider cannot deliver one.

Pure and total: any two valid coordinates produce a route, so navigation
always has *something* to show.
"""
from __future__ import annotations

from typing import Optional

from wayfinder.core.geo import bearing_deg, bearing_to_compass, haversine_m
from wayfinder.core.models import Coordinate, RouteInfo, RouteStep, TransportMode


def estimate_duration_s(distance_m: float, mode: TransportMode) -> float:
    return (distance_m / 1000.0 / mode.avg_speed_kmh) * 3600.0


def compute_fallback(
    start: Coordinate,
    end: Coordinate,
    mode: TransportMode,
    destination_label: Optional[str] = None,
) -> RouteInfo:
    distance = haversine_m(start, end)
    duration = estimate_duration_s(distance, mode)

    label = destination_label or end.as_text()
    instruction = f"Navigate to {label} by {mode.value}"
    if distance > 0:
        instruction += f", heading {bearing_to_compass(bearing_deg(start, end))}"

    return RouteInfo(
        total_distance_m=distance,
        total_duration_s=duration,
        steps=[
            RouteStep(
                distance_m=distance,
                duration_s=duration,
                instruction=instruction,
                maneuver_type=0,
            )
        ],
        geometry=[start, end],
        source="fallback",
    )

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from wayfinder.core.address import AddressResolver
from wayfinder.core.destination import DestinationResolver
from wayfinder.core.errors import DestinationNotFound, LocationUnavailable
from wayfinder.core.models import (
    AddressResolution,
    Coordinate,
    LocationObservation,
    RouteInfo,
    TransportMode,
)
from wayfinder.core.routing import RouteProviderAdapter
from wayfinder.core.session import NavigationSession
from wayfinder.providers.base import CoordinateSource, GeocodingProvider, RoutingProvider
from wayfinder.providers.location import NoLocationSource

log = logging.getLogger(__name__)


@dataclass
class NavigateResult:
    route: RouteInfo
    destination: Coordinate
    applied: bool  # False when a newer navigate superseded this one


class Navigator:
    """
    Wires the coordinate source, resolvers and route adapter to one
    navigation session.

    ``navigate`` is a strict sequence: the destination must resolve before
    routing starts, and the result only reaches the session if no newer
    navigate was issued in the meantime.
    """

    def __init__(
        self,
        geocoder: GeocodingProvider,
        router: Optional[RoutingProvider],
        source: Optional[CoordinateSource] = None,
        session: Optional[NavigationSession] = None,
    ):
        self.source = source or NoLocationSource()
        self.addresses = AddressResolver(geocoder)
        self.destinations = DestinationResolver(geocoder)
        self.routes = RouteProviderAdapter(router)
        self.session = session or NavigationSession()
        self.observation: Optional[LocationObservation] = None

    def locate(self) -> LocationObservation:
        self.observation = self.source.acquire()
        return self.observation

    def observe(self, observation: LocationObservation) -> None:
        """Record a fix obtained elsewhere (e.g. reported by a browser)."""
        self.observation = observation

    def describe(self, observation: Optional[LocationObservation] = None) -> AddressResolution:
        obs = observation or self.observation
        if obs is None:
            raise LocationUnavailable("Please wait for your current location to be detected")
        return self.addresses.resolve(obs.coordinate, obs.accuracy_m)

    def navigate(
        self,
        destination_text: str,
        mode: TransportMode = TransportMode.CAR,
        origin: Optional[Coordinate] = None,
    ) -> NavigateResult:
        if origin is None:
            if self.observation is None:
                raise LocationUnavailable("Please wait for your current location to be detected")
            origin = self.observation.coordinate

        token = self.session.begin_request()
        # a new navigate request ends the previous route
        self.session.reset()

        destination = self.destinations.resolve_text(destination_text)
        if destination is None:
            raise DestinationNotFound(destination_text)

        route = self.routes.compute_route(origin, destination, mode, destination_label=destination_text.strip())
        applied = self.session.apply(token, route)
        log.info(
            "Route to %r by %s: %.0fm, %.0fs, %d step(s) [%s]%s",
            destination_text, mode.value, route.total_distance_m, route.total_duration_s,
            len(route.steps), route.source, "" if applied else " (superseded)",
        )
        return NavigateResult(route=route, destination=destination, applied=applied)

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from wayfinder.core.models import Coordinate, LocationObservation, ReverseMatch, RouteInfo


class CoordinateSource(ABC):
    """Produce one fresh location fix per call. No retries."""

    @abstractmethod
    def acquire(self) -> LocationObservation:
        raise NotImplementedError


class GeocodingProvider(ABC):
    """Reverse and forward geocoding, normalized to engine types."""

    @abstractmethod
    def reverse(self, coordinate: Coordinate, zoom: int, layer: Optional[str] = None) -> Optional[ReverseMatch]:
        """Raise ``ResolutionFailed`` when the provider cannot be reached."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str) -> Optional[Coordinate]:
        """Top match for *query*, or None. Raise ``GeocodingUnavailable`` on transport failure."""
        raise NotImplementedError


class RoutingProvider(ABC):
    """Routed path between two points for a provider-specific profile."""

    @abstractmethod
    def directions(self, start: Coordinate, end: Coordinate, profile: str) -> RouteInfo:
        """Raise ``RoutingUnavailable`` on any failure or unusable response."""
        raise NotImplementedError

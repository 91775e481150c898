"""Error taxonomy for the navigation engine.

Only location errors and ``DestinationNotFound`` / ``GeocodingUnavailable``
ever reach a user.  ``ResolutionFailed`` and ``RoutingUnavailable`` are raised
by providers and absorbed by the resolvers that call them.
"""
from __future__ import annotations


class WayfinderError(Exception):
    """Base class for every error raised by the engine."""


# ── Sensor layer ─────────────────────────────────────────────────────────

class LocationError(WayfinderError):
    pass


class LocationUnavailable(LocationError):
    """The platform has no usable location capability."""


class LocationTimeout(LocationError):
    """No fix was produced within the acquisition timeout."""


class LocationDenied(LocationError):
    """The user or platform refused access to the location sensor."""


# ── Geocoding ────────────────────────────────────────────────────────────

class ResolutionFailed(WayfinderError):
    """Reverse geocoding produced nothing usable."""


class GeocodingUnavailable(WayfinderError):
    """Forward geocoding failed at the transport/HTTP level."""


class DestinationNotFound(WayfinderError):
    def __init__(self, query: str):
        super().__init__(
            f"Could not find the destination {query!r}. Please try a more specific address."
        )
        self.query = query


# ── Routing ──────────────────────────────────────────────────────────────

class RoutingUnavailable(WayfinderError):
    """The routing provider failed or returned an unusable response."""

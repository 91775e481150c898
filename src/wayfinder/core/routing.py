from __future__ import annotations

import logging
from typing import Optional

from wayfinder.core.errors import RoutingUnavailable
from wayfinder.core.fallback import compute_fallback
from wayfinder.core.models import Coordinate, RouteInfo, TransportMode
from wayfinder.providers.base import RoutingProvider

log = logging.getLogger(__name__)


class RouteProviderAdapter:
    """
    Routed path from the external provider, or a straight-line fallback.

    From the caller's side this never fails; only route quality varies
    (``RouteInfo.source`` tells which one was produced).  ``router=None``
    means fallback-only routing.
    """

    def __init__(self, router: Optional[RoutingProvider]):
        self.router = router

    def compute_route(
        self,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
        destination_label: Optional[str] = None,
    ) -> RouteInfo:
        if self.router is not None:
            try:
                return self.router.directions(start, end, mode.profile)
            except RoutingUnavailable as e:
                log.warning("Routing provider failed (%s), using fallback route", e)
            except Exception:
                log.exception("Routing provider raised unexpectedly, using fallback route")
        return compute_fallback(start, end, mode, destination_label)

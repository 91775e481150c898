"""Navigation session: the active route and the step the user is on.

States::

    idle --set_route--> routed --advance/retreat--> routed
      ^                   |
      +------reset--------+

Routes are applied through request tokens.  Every navigate call takes a
token from ``begin_request``; ``apply`` only installs a route whose token is
still the latest, so a slow response from an earlier navigate never
overwrites a newer one.
"""
from __future__ import annotations

import logging
import threading
from typing import Literal, Optional, Tuple

from wayfinder.core.models import RouteInfo, RouteStep

log = logging.getLogger(__name__)


class NavigationSession:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._route: Optional[RouteInfo] = None
        self._index = 0
        self._latest_token = 0

    # ---- read side ----

    @property
    def route(self) -> Optional[RouteInfo]:
        return self._route

    @property
    def current_step_index(self) -> int:
        return self._index

    @property
    def current_step(self) -> Optional[RouteStep]:
        route, index = self.snapshot()
        if route is None or not route.steps:
            return None
        return route.steps[index]

    def snapshot(self) -> Tuple[Optional[RouteInfo], int]:
        """Route and step index read together, never from two different routes."""
        with self._lock:
            return self._route, self._index

    @property
    def state(self) -> Literal["idle", "routed"]:
        return "idle" if self._route is None else "routed"

    @property
    def latest_token(self) -> int:
        return self._latest_token

    # ---- transitions ----

    def set_route(self, route: RouteInfo) -> None:
        with self._lock:
            self._route = route
            self._index = 0

    def reset(self) -> None:
        with self._lock:
            self._route = None
            self._index = 0

    def advance(self) -> None:
        with self._lock:
            if self._route is not None and self._index < len(self._route.steps) - 1:
                self._index += 1

    def retreat(self) -> None:
        with self._lock:
            if self._index > 0:
                self._index -= 1

    # ---- request tokens ----

    def begin_request(self) -> int:
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def apply(self, token: int, route: RouteInfo) -> bool:
        """Install *route* if *token* is still the latest; report whether it was."""
        with self._lock:
            if token != self._latest_token:
                log.info("Discarding stale route (token %d, latest %d)", token, self._latest_token)
                return False
            self._route = route
            self._index = 0
            return True

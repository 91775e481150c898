"""Shared service state: provider singletons and live navigation sessions."""
from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Callable, Dict, Optional, Tuple

from fastapi import HTTPException

from wayfinder.config import settings
from wayfinder.core.engine import Navigator
from wayfinder.providers.base import GeocodingProvider, RoutingProvider
from wayfinder.providers.registry import build_providers

log = logging.getLogger(__name__)

_provider_cache: Dict[str, Tuple[GeocodingProvider, Optional[RoutingProvider]]] = {}


def get_providers() -> Tuple[GeocodingProvider, Optional[RoutingProvider]]:
    """FastAPI dependency. Providers are built once per provider string."""
    key = settings.providers
    if key not in _provider_cache:
        _provider_cache[key] = build_providers(key)
    return _provider_cache[key]


class SessionStore:
    """
    In-memory navigators keyed by session id. Nothing is persisted.

    A session idle for longer than ``idle_ttl_s`` is dropped on the next store
    access; at ``max_sessions`` the least recently used one makes room for a
    new session.
    """

    def __init__(
        self,
        idle_ttl_s: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.idle_ttl_s = settings.session_idle_ttl_s if idle_ttl_s is None else idle_ttl_s
        self.max_sessions = settings.max_sessions if max_sessions is None else max_sessions
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, Navigator] = {}
        self._last_used: Dict[str, float] = {}

    def _expire(self, now: float) -> None:
        stale = [sid for sid, t in self._last_used.items() if now - t > self.idle_ttl_s]
        for sid in stale:
            self._forget(sid)
        if stale:
            log.info("Expired %d idle navigation session(s)", len(stale))

    def _forget(self, session_id: str) -> bool:
        self._last_used.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def create(self, geocoder: GeocodingProvider, router: Optional[RoutingProvider]) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            now = self._clock()
            self._expire(now)
            while self._sessions and len(self._sessions) >= self.max_sessions:
                oldest = min(self._last_used, key=self._last_used.get)
                log.info("Session limit reached, evicting %s", oldest)
                self._forget(oldest)
            self._sessions[session_id] = Navigator(geocoder, router)
            self._last_used[session_id] = now
        return session_id

    def get(self, session_id: str) -> Navigator:
        with self._lock:
            now = self._clock()
            self._expire(now)
            nav = self._sessions.get(session_id)
            if nav is not None:
                self._last_used[session_id] = now
        if nav is None:
            raise HTTPException(status_code=404, detail="Navigation session not found")
        return nav

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._forget(session_id)

    def __len__(self) -> int:
        with self._lock:
            self._expire(self._clock())
            return len(self._sessions)


sessions = SessionStore()


def get_sessions() -> SessionStore:
    return sessions

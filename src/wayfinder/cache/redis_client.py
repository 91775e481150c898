"""Optional Redis cache for geocoding responses.

With ``WAYFINDER_REDIS_URL`` unset every helper is a no-op.  Cache errors are
logged and otherwise ignored; a lookup then simply goes to the provider.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from wayfinder.config import settings

log = logging.getLogger(__name__)

_client = None
_connected = False


def get_redis():
    """Connect once on first use.  Returns ``redis.Redis`` or ``None``."""
    global _client, _connected
    if _connected:
        return _client
    _connected = True
    if not settings.redis_url:
        return None

    try:
        import redis

        client = redis.Redis.from_url(settings.redis_url, decode_responses=True, socket_connect_timeout=3)
        client.ping()
    except Exception as exc:
        # bad URL scheme raises ValueError, not RedisError
        log.warning("Redis unavailable (%s), geocoding responses will not be cached", exc)
        return None
    log.info("Redis connected: %s", settings.redis_url)
    _client = client
    return _client


def redis_healthy() -> bool:
    try:
        r = get_redis()
        return r is not None and bool(r.ping())
    except Exception as exc:
        log.warning("Redis ping failed: %s", exc)
        return False


def cache_get_json(key: str) -> Optional[Any]:
    try:
        r = get_redis()
        if r is None:
            return None
        raw = r.get(key)
        return json.loads(raw) if raw is not None else None
    except Exception as exc:
        log.debug("Cache read failed for %s: %s", key, exc)
        return None


def cache_set_json(key: str, value: Any, ttl: int) -> None:
    try:
        r = get_redis()
        if r is None:
            return
        r.set(key, json.dumps(value), ex=ttl)
    except Exception as exc:
        log.debug("Cache write failed for %s: %s", key, exc)

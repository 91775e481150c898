from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from wayfinder.cache import keys
from wayfinder.cache.redis_client import cache_get_json, cache_set_json
from wayfinder.config import settings
from wayfinder.core.errors import GeocodingUnavailable, ResolutionFailed
from wayfinder.core.models import Coordinate, ReverseMatch
from wayfinder.providers.base import GeocodingProvider
from wayfinder.providers.http import HTTPClient

log = logging.getLogger(__name__)


def _parse_coordinate(lat: Any, lon: Any) -> Optional[Coordinate]:
    if lat is None or lon is None:
        return None
    try:
        return Coordinate(lat=float(lat), lon=float(lon))
    except (TypeError, ValueError):
        return None


def parse_reverse(data: Any) -> Optional[ReverseMatch]:
    """Normalize a Nominatim ``/reverse`` payload; None when it carries nothing."""
    if not isinstance(data, dict) or data.get("error"):
        return None

    raw_addr = data.get("address") or {}
    address: Dict[str, str] = {
        str(k): str(v) for k, v in raw_addr.items() if v is not None and str(v).strip()
    }
    display_name = data.get("display_name") or None

    if not address and not display_name:
        return None

    return ReverseMatch(
        display_name=display_name,
        address=address,
        coordinate=_parse_coordinate(data.get("lat"), data.get("lon")),
    )


@dataclass
class NominatimGeocoder(GeocodingProvider):
    """
    OpenStreetMap Nominatim.

    Nominatim's usage policy requires an identifying User-Agent and asks
    clients to cache results, so responses go through the Redis cache when
    one is configured.
    """

    base_url: str = field(default_factory=lambda: settings.nominatim_url)
    user_agent: str = field(default_factory=lambda: settings.user_agent)
    accept_language: str = field(default_factory=lambda: settings.accept_language)
    http: Any = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.http is None:
            self.http = HTTPClient(
                user_agent=self.user_agent,
                timeout_s=settings.http_timeout_s,
                tries=settings.http_tries,
                backoff_s=settings.http_backoff_s,
                headers={"Accept-Language": self.accept_language},
            )

    # ---------- reverse ----------

    def reverse(self, coordinate: Coordinate, zoom: int, layer: Optional[str] = None) -> Optional[ReverseMatch]:
        key = keys.nominatim_reverse(coordinate.lat, coordinate.lon, zoom, layer)
        data = cache_get_json(key)
        if data is None:
            params: Dict[str, Any] = {
                "format": "json",
                "lat": coordinate.lat,
                "lon": coordinate.lon,
                "zoom": zoom,
                "addressdetails": 1,
            }
            if layer:
                params["layer"] = layer
            try:
                data = self.http.get_json(f"{self.base_url}/reverse", params=params)
            except (requests.RequestException, ValueError) as e:
                raise ResolutionFailed(f"reverse geocoding failed: {type(e).__name__}: {e}") from e
            if isinstance(data, dict) and not data.get("error"):
                cache_set_json(key, data, settings.ttl_reverse)

        return parse_reverse(data)

    # ---------- search ----------

    def search(self, query: str) -> Optional[Coordinate]:
        key = keys.nominatim_search(query)
        data = cache_get_json(key)
        if data is None:
            try:
                data = self.http.get_json(
                    f"{self.base_url}/search",
                    params={"format": "json", "q": query, "limit": 1},
                )
            except (requests.RequestException, ValueError) as e:
                raise GeocodingUnavailable(f"geocoding failed: {type(e).__name__}: {e}") from e
            if isinstance(data, list) and data:
                cache_set_json(key, data, settings.ttl_search)

        if not isinstance(data, list) or not data:
            return None
        top = data[0]
        if not isinstance(top, dict):
            return None
        return _parse_coordinate(top.get("lat"), top.get("lon"))

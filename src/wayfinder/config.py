"""Centralized settings for the wayfinder engine."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "WAYFINDER_"}

    # Providers: see providers/registry.py for the token syntax
    providers: str = "nominatim+ors"
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    ors_url: str = "https://api.openrouteservice.org"
    ors_api_key: str = ""
    user_agent: str = "wayfinder/0.1.0"
    accept_language: str = "en"

    # HTTP: every provider call is bounded by this timeout
    http_timeout_s: float = 10.0
    http_tries: int = 2
    http_backoff_s: float = 0.5

    # Coordinate source
    location_timeout_s: int = 15
    termux_location_bin: str = "termux-location"

    # Address resolution thresholds (metres)
    display_name_max_m: float = 10.0   # round-trip below this -> trust display_name
    requery_mismatch_m: float = 20.0   # round-trip above this -> suspect, re-query
    low_precision_accuracy_m: float = 50.0  # device accuracy above this -> try zoom 16

    # Redis: empty string means disabled (graceful fallback)
    redis_url: str = ""

    # TTL values in seconds for each cached data type
    ttl_reverse: int = 86400      # 24 h, reverse geocoding for an exact coordinate
    ttl_search: int = 604800      # 7 d, forward geocoding for a query string

    # API navigation sessions (in memory)
    session_idle_ttl_s: float = 3600.0
    max_sessions: int = 1000

    log_level: str = "INFO"


settings = Settings()

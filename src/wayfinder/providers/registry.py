from __future__ import annotations

from typing import Optional, Tuple

from wayfinder.providers.base import GeocodingProvider, RoutingProvider

DEFAULT_PROVIDERS = "nominatim+ors"


def build_providers(provider_str: str) -> Tuple[GeocodingProvider, Optional[RoutingProvider]]:
    """
    Build a (geocoder, router) pair from a CLI string like:
      "nominatim+ors"
      "nominatim+fallback"   (no routing service: straight-line routes only)
      "mock"                 (mock geocoder and mock router)

    A missing router token means fallback-only routing.
    """
    tokens = [t.strip().lower() for t in provider_str.split("+") if t.strip()]
    if not tokens:
        tokens = DEFAULT_PROVIDERS.split("+")

    # Local imports so unused providers are never constructed
    from wayfinder.providers.mock import MockGeocoder, MockRouter
    from wayfinder.providers.nominatim import NominatimGeocoder
    from wayfinder.providers.openroute import OpenRouteServiceRouter

    geocoder: Optional[GeocodingProvider] = None
    router: Optional[RoutingProvider] = None

    for t in tokens:
        if t == "nominatim":
            geocoder = NominatimGeocoder()
        elif t in ("ors", "openroute"):
            router = OpenRouteServiceRouter()
        elif t == "fallback":
            router = None
        elif t == "mock":
            geocoder = geocoder or MockGeocoder()
            router = router or MockRouter()
        else:
            raise ValueError(
                f"Unknown provider token: '{t}' (supported: nominatim, ors, fallback, mock)"
            )

    if geocoder is None:
        raise ValueError(f"No geocoding provider in '{provider_str}'")
    return geocoder, router

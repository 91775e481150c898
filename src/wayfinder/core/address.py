"""Reverse geocoding with confidence escalation.

The provider is re-queried when the device fix is vague and the answer has
no street, and again when the coordinate the provider matched disagrees with
the one we asked about.  Both retries are driven by measured disagreement,
not by HTTP failure.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from wayfinder.config import settings
from wayfinder.core.errors import ResolutionFailed
from wayfinder.core.geo import haversine_m
from wayfinder.core.models import AddressResolution, Coordinate, ReverseMatch
from wayfinder.providers.base import GeocodingProvider

log = logging.getLogger(__name__)

MAX_ZOOM = 18
GENERAL_ZOOM = 16
ADDRESS_LAYER = "address"

_COUNTRY_CODE_SUFFIX = re.compile(r",\s*[A-Z]{2}\s*$")


# ---------------------------------------------------------------------------
# Pure formatting helpers
# ---------------------------------------------------------------------------

def strip_country_code(text: str) -> str:
    return _COUNTRY_CODE_SUFFIX.sub("", text)


def assemble_address(address: Dict[str, str]) -> Optional[str]:
    """Join the present address fields in fixed precedence order, or None."""
    parts: List[str] = []
    if address.get("block"):
        parts.append(f"Block {address['block']}")
    if address.get("building"):
        parts.append(address["building"])
    if address.get("house_number"):
        parts.append(address["house_number"])
    if address.get("unit"):
        parts.append(f"Unit {address['unit']}")
    if address.get("level"):
        parts.append(f"Level {address['level']}")
    if address.get("road"):
        parts.append(address["road"])

    area = address.get("neighbourhood") or address.get("suburb")
    if area:
        parts.append(area)
    locality = address.get("city") or address.get("town") or address.get("village")
    if locality:
        parts.append(locality)

    if address.get("state"):
        parts.append(address["state"])
    if address.get("country"):
        parts.append(address["country"])

    if not parts:
        return None
    return strip_country_code(", ".join(parts))


def augment_display_name(display_name: str, address: Dict[str, str]) -> str:
    """Prefix the block number when the provider keeps it out of display_name."""
    block = address.get("block")
    if block and block not in display_name:
        display_name = f"Block {block}, {display_name}"
    return strip_country_code(display_name)


def round_trip_m(requested: Coordinate, match: Optional[ReverseMatch]) -> Optional[float]:
    """Distance between the requested and matched coordinate, if one was echoed."""
    if match is None or match.coordinate is None:
        return None
    return haversine_m(requested, match.coordinate)


def format_match(requested: Coordinate, match: Optional[ReverseMatch], distance: Optional[float]) -> str:
    if match is None:
        return requested.as_text()

    trust_display = distance is None or distance < settings.display_name_max_m
    if trust_display and match.display_name:
        return augment_display_name(match.display_name, match.address)

    return assemble_address(match.address) or requested.as_text()


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class AddressResolver:
    def __init__(self, geocoder: GeocodingProvider):
        self.geocoder = geocoder

    def _retry(self, coordinate: Coordinate, zoom: int, layer: Optional[str]) -> Optional[ReverseMatch]:
        try:
            return self.geocoder.reverse(coordinate, zoom=zoom, layer=layer)
        except ResolutionFailed as e:
            log.warning("Reverse geocoding retry (zoom=%d) failed: %s", zoom, e)
            return None

    def resolve(self, coordinate: Coordinate, accuracy_m: Optional[float] = None) -> AddressResolution:
        try:
            match = self.geocoder.reverse(coordinate, zoom=MAX_ZOOM, layer=ADDRESS_LAYER)
        except ResolutionFailed as e:
            log.warning("Reverse geocoding failed for %s: %s", coordinate.as_text(), e)
            return AddressResolution(
                formatted_address=coordinate.as_text(),
                source_coordinate=coordinate,
                confidence_m=0.0,
            )

        # Vague fix and no street: a coarser, unrestricted lookup may do better
        if (
            accuracy_m is not None
            and accuracy_m > settings.low_precision_accuracy_m
            and (match is None or not match.has_street)
        ):
            general = self._retry(coordinate, GENERAL_ZOOM, None)
            if general is not None and general.has_street:
                match = general

        distance = round_trip_m(coordinate, match)
        if distance is not None and distance > settings.requery_mismatch_m:
            log.warning(
                "Address coordinates mismatch: requested %s, returned %s (%.1fm)",
                coordinate.as_text(), match.coordinate.as_text(), distance,
            )
            retry = self._retry(coordinate, MAX_ZOOM, None)
            retry_distance = round_trip_m(coordinate, retry)
            if retry_distance is not None and retry_distance < distance:
                match, distance = retry, retry_distance

        return AddressResolution(
            formatted_address=format_match(coordinate, match, distance),
            source_coordinate=coordinate,
            confidence_m=distance or 0.0,
        )

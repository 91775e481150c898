from __future__ import annotations

import logging
from typing import Optional

from wayfinder.core.models import Coordinate
from wayfinder.providers.base import GeocodingProvider

log = logging.getLogger(__name__)


class DestinationResolver:
    """Free text -> best-match coordinate (top forward-geocoding result only)."""

    def __init__(self, geocoder: GeocodingProvider):
        self.geocoder = geocoder

    def resolve_text(self, query: str) -> Optional[Coordinate]:
        """None when nothing matches; ``GeocodingUnavailable`` propagates."""
        query = query.strip()
        if not query:
            return None

        coordinate = self.geocoder.search(query)
        if coordinate is None:
            log.info("No geocoding match for %r", query)
        return coordinate

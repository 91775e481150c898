"""Coordinate sources: one fresh fix per ``acquire()``, no retries."""
from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Optional

from wayfinder.config import settings
from wayfinder.core.errors import LocationDenied, LocationTimeout, LocationUnavailable
from wayfinder.core.models import Coordinate, LocationObservation
from wayfinder.providers.base import CoordinateSource

log = logging.getLogger(__name__)


@dataclass
class TermuxLocationSource(CoordinateSource):
    """GPS access via the Termux API.

    ``-p gps -r once`` asks for a single fresh GPS fix; ``-r last`` would
    return a cached one, which is never acceptable here.
    """

    executable: str = field(default_factory=lambda: settings.termux_location_bin)
    timeout_s: int = field(default_factory=lambda: settings.location_timeout_s)

    def acquire(self) -> LocationObservation:
        try:
            result = subprocess.run(
                [self.executable, "-p", "gps", "-r", "once"],
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as e:
            raise LocationUnavailable("Geolocation is not supported on this device") from e
        except subprocess.TimeoutExpired as e:
            raise LocationTimeout(f"No location fix within {self.timeout_s}s") from e

        if result.returncode != 0:
            err = (result.stderr or "").strip() or "unknown error"
            if "permission" in err.lower() or "denied" in err.lower():
                raise LocationDenied(f"Location permission denied: {err}")
            raise LocationUnavailable(f"Failed to get location: {err}")

        if not result.stdout or not result.stdout.strip():
            raise LocationUnavailable("Failed to get location: empty response")

        try:
            data = json.loads(result.stdout)
            coordinate = Coordinate(lat=float(data["latitude"]), lon=float(data["longitude"]))
            accuracy = data.get("accuracy")
            return LocationObservation(
                coordinate=coordinate,
                accuracy_m=float(accuracy) if accuracy is not None else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(f"Failed to get location: unreadable fix ({e})") from e


@dataclass
class StaticLocationSource(CoordinateSource):
    """A fix supplied by the caller (browser geolocation, CLI ``--from``)."""

    coordinate: Coordinate
    accuracy_m: Optional[float] = None

    def acquire(self) -> LocationObservation:
        return LocationObservation(coordinate=self.coordinate, accuracy_m=self.accuracy_m)


class NoLocationSource(CoordinateSource):
    """Platform without any location capability."""

    def acquire(self) -> LocationObservation:
        raise LocationUnavailable("Geolocation is not supported on this device")

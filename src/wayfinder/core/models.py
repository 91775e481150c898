from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """WGS-84 position in degrees."""

    model_config = {"frozen": True}

    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)

    @classmethod
    def from_lon_lat(cls, pair: List[float]) -> "Coordinate":
        """Build from a GeoJSON-style ``[lon, lat]`` pair."""
        return cls(lat=float(pair[1]), lon=float(pair[0]))

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse ``"lat,lon"`` as typed on the command line."""
        lat, lon = (part.strip() for part in text.split(",", 1))
        return cls(lat=float(lat), lon=float(lon))

    def as_text(self) -> str:
        return f"{self.lat:.6f}, {self.lon:.6f}"


class LocationObservation(BaseModel):
    model_config = {"frozen": True}

    coordinate: Coordinate
    accuracy_m: Optional[float] = Field(default=None, ge=0.0)


class AddressResolution(BaseModel):
    model_config = {"frozen": True}

    formatted_address: str
    source_coordinate: Coordinate
    # distance between requested and provider-matched coordinate
    confidence_m: float = Field(default=0.0, ge=0.0)


class TransportMode(str, Enum):
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"

    @property
    def profile(self) -> str:
        # bus and train share one upstream profile, so provider-backed
        # routes for the two are identical; only the fallback differs.
        if self is TransportMode.CAR:
            return "driving-car"
        return "public-transport"

    @property
    def avg_speed_kmh(self) -> float:
        return {
            TransportMode.CAR: 50.0,
            TransportMode.BUS: 30.0,
            TransportMode.TRAIN: 80.0,
        }[self]


class RouteStep(BaseModel):
    model_config = {"frozen": True}

    distance_m: float
    duration_s: float
    instruction: str
    maneuver_type: int = 0


class RouteInfo(BaseModel):
    """A complete computed route.

    Provider-reported totals take precedence, so ``steps`` need not sum to
    ``total_distance_m`` / ``total_duration_s``.
    """

    model_config = {"frozen": True}

    total_distance_m: float
    total_duration_s: float
    steps: Tuple[RouteStep, ...] = ()
    geometry: Tuple[Coordinate, ...] = Field(..., min_length=2)
    source: Literal["provider", "fallback"] = "provider"


class ReverseMatch(BaseModel):
    """Provider-neutral reverse geocoding response."""

    display_name: Optional[str] = None
    address: Dict[str, str] = Field(default_factory=dict)
    # coordinate the provider actually matched, if it echoed one
    coordinate: Optional[Coordinate] = None

    @property
    def has_street(self) -> bool:
        return bool(self.address.get("road"))

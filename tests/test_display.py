import pytest

from wayfinder.core.display import format_distance, format_duration
from wayfinder.core.geo import bearing_deg, bearing_to_compass, haversine_m
from wayfinder.core.models import Coordinate


@pytest.mark.parametrize(
    "meters,text",
    [(0, "0 m"), (412.6, "413 m"), (999.4, "999 m"), (1000, "1.0 km"), (15234, "15.2 km")],
)
def test_format_distance(meters, text):
    assert format_distance(meters) == text


@pytest.mark.parametrize(
    "seconds,text",
    [(0, "0 min"), (59, "0 min"), (360, "6 min"), (3600, "1h 0m"), (5430, "1h 30m")],
)
def test_format_duration(seconds, text):
    assert format_duration(seconds) == text


def test_haversine_is_symmetric_and_zero_on_identity():
    a = Coordinate(lat=1.3521, lon=103.8198)
    b = Coordinate(lat=1.2834, lon=103.8607)
    assert haversine_m(a, a) == 0.0
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))
    assert haversine_m(a, b) == pytest.approx(8890, rel=0.01)


@pytest.mark.parametrize(
    "deg,compass",
    [(0, "north"), (22, "north"), (23, "northeast"), (90, "east"), (180, "south"), (270, "west"), (338, "north"), (359.9, "north")],
)
def test_bearing_to_compass(deg, compass):
    assert bearing_to_compass(deg) == compass


def test_bearing_due_east():
    a = Coordinate(lat=0.0, lon=0.0)
    assert bearing_deg(a, Coordinate(lat=0.0, lon=1.0)) == pytest.approx(90.0)

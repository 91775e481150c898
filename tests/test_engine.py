import pytest

from conftest import SINGAPORE, FakeGeocoder, FakeRouter, make_route, offset_north, reverse_match
from wayfinder.core.engine import Navigator
from wayfinder.core.errors import DestinationNotFound, GeocodingUnavailable, LocationUnavailable
from wayfinder.core.models import LocationObservation, TransportMode
from wayfinder.providers.location import StaticLocationSource

MARINA = offset_north(SINGAPORE, 2500)


def _navigator(router=None, places=None, reverse=None):
    geo = FakeGeocoder(reverse=reverse, places=places if places is not None else {"Marina Bay": MARINA})
    router = router if router is not None else FakeRouter(make_route(3))
    nav = Navigator(geo, router, source=StaticLocationSource(SINGAPORE, accuracy_m=20))
    return nav, geo, router


def test_navigate_routes_from_latest_fix():
    nav, geo, router = _navigator()
    nav.locate()

    result = nav.navigate("Marina Bay", TransportMode.BUS)

    assert result.applied
    assert result.destination == MARINA
    assert router.calls == [(SINGAPORE, MARINA, "public-transport")]
    assert nav.session.route is result.route
    assert nav.session.current_step_index == 0


def test_destination_not_found_never_calls_router():
    nav, geo, router = _navigator(places={})
    nav.locate()

    with pytest.raises(DestinationNotFound):
        nav.navigate("Atlantis")
    assert router.calls == []
    assert nav.session.state == "idle"


def test_blank_destination_is_not_found_without_lookup():
    nav, geo, router = _navigator()
    with pytest.raises(DestinationNotFound):
        nav.navigate("   ", origin=SINGAPORE)
    assert geo.search_calls == []


def test_geocoding_outage_propagates():
    nav, geo, router = _navigator(places={"Marina Bay": GeocodingUnavailable("503")})
    with pytest.raises(GeocodingUnavailable):
        nav.navigate("Marina Bay", origin=SINGAPORE)
    assert router.calls == []


def test_navigate_requires_a_location():
    nav, geo, router = _navigator()
    with pytest.raises(LocationUnavailable):
        nav.navigate("Marina Bay")


def test_routing_outage_still_produces_route():
    nav, geo, router = _navigator(router=FakeRouter(fail=True))
    result = nav.navigate("Marina Bay", TransportMode.CAR, origin=SINGAPORE)

    assert result.route.source == "fallback"
    assert result.route.steps[0].instruction.startswith("Navigate to Marina Bay by car")
    assert nav.session.route is result.route


def test_new_navigate_replaces_route_and_resets_step():
    nav, geo, router = _navigator()
    nav.navigate("Marina Bay", origin=SINGAPORE)
    nav.session.advance()
    assert nav.session.current_step_index == 1

    nav.navigate("Marina Bay", origin=SINGAPORE)
    assert nav.session.current_step_index == 0


def test_superseded_navigate_is_discarded():
    """A navigate issued while another is resolving wins, even if it finishes first."""
    later_route = make_route(5)
    nav, geo, router = _navigator()

    class InterleavingGeocoder(FakeGeocoder):
        def __init__(self):
            super().__init__(places={"Marina Bay": MARINA, "Changi": offset_north(SINGAPORE, 9000)})
            self.nested = False

        def search(self, query):
            if query == "Marina Bay" and not self.nested:
                # the user navigates again before the first lookup returns
                self.nested = True
                router.route = later_route
                inner = nav.navigate("Changi", origin=SINGAPORE)
                assert inner.applied
                router.route = make_route(2)
            return super().search(query)

    nav.destinations.geocoder = InterleavingGeocoder()
    outer = nav.navigate("Marina Bay", origin=SINGAPORE)

    assert outer.applied is False
    assert nav.session.route is later_route


def test_describe_uses_latest_observation():
    nav, geo, router = _navigator(reverse={
        (18, "address"): reverse_match(SINGAPORE, "Orchard Road, Singapore", road="Orchard Road"),
    })
    with pytest.raises(LocationUnavailable):
        nav.describe()

    nav.locate()
    assert nav.describe().formatted_address == "Orchard Road, Singapore"

    moved = LocationObservation(coordinate=MARINA, accuracy_m=5)
    nav.observe(moved)
    assert nav.observation is moved
    # no reverse answer scripted for this spot beyond the 18/address one
    assert nav.describe().source_coordinate == MARINA

import pytest
from fastapi.testclient import TestClient

from wayfinder.api import app
from wayfinder.deps import SessionStore, get_providers, get_sessions
from wayfinder.providers.mock import GAZETTEER, MockGeocoder, MockRouter

ORIGIN = {"lat": 1.3521, "lon": 103.8198}


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def client(store):
    providers = (MockGeocoder(), MockRouter())
    app.dependency_overrides[get_providers] = lambda: providers
    app.dependency_overrides[get_sessions] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def offline_client(store):
    app.dependency_overrides[get_providers] = lambda: (MockGeocoder(), MockRouter(fail=True))
    app.dependency_overrides[get_sessions] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _new_session(client) -> str:
    r = client.post("/sessions")
    assert r.status_code == 201
    return r.json()["session_id"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert "providers" in body


def test_address_endpoint(client):
    r = client.post("/address", json={**ORIGIN, "accuracy_m": 12})
    assert r.status_code == 200
    body = r.json()
    assert "Orchard Road" in body["formatted_address"]
    assert body["source_coordinate"] == ORIGIN


def test_address_rejects_invalid_latitude(client):
    r = client.post("/address", json={"lat": 91, "lon": 0})
    assert r.status_code == 422


def test_geocode(client):
    r = client.get("/geocode", params={"q": "Marina Bay Sands"})
    assert r.status_code == 200
    mbs = GAZETTEER["marina bay sands"]
    assert r.json() == {"lat": mbs.lat, "lon": mbs.lon}

    assert client.get("/geocode", params={"q": "Atlantis"}).status_code == 404


def test_route_falls_back_when_router_is_down(offline_client):
    r = offline_client.post("/route", json={
        "start": ORIGIN,
        "end": {"lat": 1.2834, "lon": 103.8607},
        "mode": "train",
        "destination_label": "Marina Bay Sands",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "fallback"
    assert len(body["steps"]) == 1
    assert body["steps"][0]["instruction"].startswith("Navigate to Marina Bay Sands by train")


def test_session_flow(client):
    sid = _new_session(client)

    r = client.get(f"/sessions/{sid}")
    assert r.json()["state"] == "idle"

    r = client.post(f"/sessions/{sid}/location", json={**ORIGIN, "accuracy_m": 8})
    assert r.status_code == 200
    assert "Orchard Road" in r.json()["formatted_address"]

    r = client.post(f"/sessions/{sid}/navigate", json={"destination": "Marina Bay Sands", "mode": "car"})
    assert r.status_code == 200
    body = r.json()
    assert body["applied"] is True
    assert body["state"] == "routed"
    assert body["route"]["source"] == "provider"
    assert body["current_step_index"] == 0
    assert body["distance_text"].endswith("km")

    for _ in range(5):
        r = client.post(f"/sessions/{sid}/advance")
    assert r.json()["current_step_index"] == 2
    assert r.json()["current_step"]["instruction"] == "Arrive at your destination"

    r = client.post(f"/sessions/{sid}/retreat")
    assert r.json()["current_step_index"] == 1


def test_navigate_with_explicit_origin(client):
    sid = _new_session(client)
    r = client.post(f"/sessions/{sid}/navigate", json={
        "destination": "Changi Airport", "mode": "bus", "origin": ORIGIN,
    })
    assert r.status_code == 200
    assert r.json()["destination"]["lat"] == GAZETTEER["changi airport"].lat


def test_navigate_unknown_destination_is_404(client):
    sid = _new_session(client)
    client.post(f"/sessions/{sid}/location", json=ORIGIN)

    r = client.post(f"/sessions/{sid}/navigate", json={"destination": "Atlantis"})
    assert r.status_code == 404
    assert r.json()["error"] == "DestinationNotFound"

    assert client.get(f"/sessions/{sid}").json()["route"] is None


def test_navigate_without_location_is_503(client):
    sid = _new_session(client)
    r = client.post(f"/sessions/{sid}/navigate", json={"destination": "Marina Bay Sands"})
    assert r.status_code == 503
    assert r.json()["error"] == "LocationUnavailable"


def test_navigate_rejects_empty_destination(client):
    sid = _new_session(client)
    r = client.post(f"/sessions/{sid}/navigate", json={"destination": "", "origin": ORIGIN})
    assert r.status_code == 422


def test_delete_session(client, store):
    sid = _new_session(client)
    assert len(store) == 1

    assert client.delete(f"/sessions/{sid}").status_code == 204
    assert client.get(f"/sessions/{sid}").status_code == 404
    assert client.delete(f"/sessions/{sid}").status_code == 404
    assert len(store) == 0

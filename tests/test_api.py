"""HTTP surface: rituals driven through the FastAPI app."""

from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from arcana.main import app
from arcana.services.ritual_registry import RitualRegistry, get_ritual_registry
from arcana.views import ErrorResponse


@pytest.fixture
def content(fake_content):
    return fake_content()


@pytest.fixture
def client(content, build_engine):
    """Serve engines built on the fake content service."""

    registry = RitualRegistry(lambda: build_engine(content))
    app.dependency_overrides[get_ritual_registry] = lambda: registry

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _poll(client: TestClient, client_id: str, predicate, timeout: float = 2.0) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        state = client.get(f"/rituals/{client_id}").json()
        if predicate(state):
            return state
        if time.monotonic() > deadline:
            raise AssertionError(f"state never matched: {state}")
        time.sleep(0.01)


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_spread_catalog(client):
    spreads = client.get("/spreads").json()
    assert len(spreads) == 12

    celtic = client.get("/spreads/celtic").json()
    assert celtic["card_count"] == 10
    assert celtic["layout_type"] == "absolute"
    assert celtic["positions"][1]["rotation"] == 90

    assert client.get("/spreads/PENTAGRAM").status_code == 404


def test_card_library(client):
    assert len(client.get("/cards").json()) == 78
    court = client.get("/cards", params={"pool": "COURT"}).json()
    assert len(court) == 16

    fool = client.get("/cards/0").json()
    assert fool["name_en"] == "The Fool"
    assert fool["is_major"] is True
    assert client.get("/cards/500").status_code == 404


def test_full_ritual_round_trip(client, content):
    created = client.post("/rituals")
    assert created.status_code == 201
    state = created.json()
    client_id = state["client_id"]
    assert state["phase"] == "INTRO"

    assert client.post(f"/rituals/{client_id}/enter").json()["accepted"]
    spread = client.post(f"/rituals/{client_id}/spread", json={"spread_id": "THREE"}).json()
    assert spread["state"]["spread_id"] == "THREE"
    client.post(f"/rituals/{client_id}/question", json={"question": "Where am I heading?"})

    started = client.post(f"/rituals/{client_id}/start").json()
    assert started["accepted"]
    assert started["state"]["epoch"] == 1

    state = _poll(client, client_id, lambda s: s["phase"] == "PICKING")
    taps = [card["id"] for card in state["active_pool"][:3]]
    for index, visual_id in enumerate(taps):
        result = client.post(f"/rituals/{client_id}/select", json={"visual_id": visual_id}).json()
        assert result["accepted"]
        assert result["picked"]["visual_id"] == visual_id
        assert result["picked"]["position"] == index
    assert result["reveal_delay_seconds"] is not None
    assert result["state"]["phase"] == "READING"

    state = _poll(client, client_id, lambda s: s["has_audio"])
    assert state["reading_text"] == content.reading
    assert content.reading_calls[0][2] == "Where am I heading?"

    for position in range(3):
        client.post(f"/rituals/{client_id}/reveal", json={"position": position})
    state = client.get(f"/rituals/{client_id}").json()
    assert all(card["revealed"] for card in state["picked"])
    assert state["audio_playing"]

    voice = client.get(f"/rituals/{client_id}/voice")
    assert voice.status_code == 200
    assert voice.headers["content-type"] == "audio/wav"

    reset = client.post(f"/rituals/{client_id}/reset").json()
    assert reset["accepted"]
    assert reset["state"]["phase"] == "INPUT"
    assert reset["state"]["picked"] == []

    assert client.delete(f"/rituals/{client_id}").status_code == 204
    assert client.get(f"/rituals/{client_id}").status_code == 404


def test_out_of_phase_actions_are_not_accepted(client):
    client_id = client.post("/rituals").json()["client_id"]

    result = client.post(f"/rituals/{client_id}/start").json()
    assert result["accepted"] is False
    assert result["state"]["phase"] == "INTRO"

    selection = client.post(f"/rituals/{client_id}/select", json={"visual_id": 3}).json()
    assert selection["accepted"] is False
    assert selection["picked"] is None


def test_library_overlay_round_trip(client):
    client_id = client.post("/rituals").json()["client_id"]
    client.post(f"/rituals/{client_id}/enter")

    opened = client.post(f"/rituals/{client_id}/library/open").json()
    assert opened["state"]["phase"] == "LIBRARY"
    assert opened["state"]["previous_phase"] == "INPUT"

    closed = client.post(f"/rituals/{client_id}/library/close").json()
    assert closed["state"]["phase"] == "INPUT"


def test_unknown_client_and_spread(client):
    assert client.get("/rituals/missing").status_code == 404

    client_id = client.post("/rituals").json()["client_id"]
    client.post(f"/rituals/{client_id}/enter")
    response = client.post(f"/rituals/{client_id}/spread", json={"spread_id": "PENTAGRAM"})
    assert response.status_code == 404


def test_not_found_bodies_match_the_documented_error_schema(client):
    schema = client.get("/openapi.json").json()
    error_ref = "#/components/schemas/ErrorResponse"
    for path, method in (
        ("/rituals/{client_id}", "get"),
        ("/rituals/{client_id}/select", "post"),
        ("/spreads/{spread_id}", "get"),
        ("/cards/{card_id}", "get"),
    ):
        not_found = schema["paths"][path][method]["responses"]["404"]
        assert not_found["content"]["application/json"]["schema"]["$ref"] == error_ref

    body = client.get("/rituals/missing").json()
    assert ErrorResponse.model_validate(body).detail == "Ritual session not found"

import pytest
from fastapi.testclient import TestClient

from timekeeper.main import create_app


@pytest.fixture
def client(settings, controller):
    with TestClient(create_app(settings=settings, controller=controller)) as test_client:
        yield test_client


def test_health(client, state_file):
    response = client.get("/api/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["state_file"] == str(state_file)


def test_create_and_get_timer(client):
    response = client.post("/api/timers", json={"pattern": "25m", "message": "Tea"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["timer"]["id"] == "1"
    assert body["timer"]["durationText"] == "25m"

    response = client.get("/api/timers/1")
    assert response.status_code == 200
    view = response.json()
    assert view["timer"]["message"] == "Tea"
    assert view["progress"] == 0
    assert view["remaining_text"] == "25:00"


def test_create_invalid_pattern(client):
    response = client.post("/api/timers", json={"pattern": "soon"})

    assert response.status_code == 400
    assert "soon" in response.json()["detail"]


def test_create_sequence_returns_summary(client):
    response = client.post("/api/timers", json={"pattern": "pomodoro"})

    body = response.json()
    assert body["summary"]["phase_count"] == 8
    assert body["timer"]["isSequence"] is True
    assert body["timer"]["phases"][0]["originalDurationText"] == "25m"


def test_list_timers(client, scheduler, clock):
    client.post("/api/timers", json={"pattern": "1m"})
    client.post("/api/timers", json={"pattern": "10m"})
    clock.advance(60)
    scheduler.fire("1")

    active = client.get("/api/timers").json()
    everything = client.get("/api/timers", params={"include_all": True}).json()

    assert [v["timer"]["id"] for v in active["timers"]] == ["2"]
    assert everything["count"] == 2


def test_get_unknown_timer(client):
    assert client.get("/api/timers/9").status_code == 404


def test_pause_resume_remove(client):
    client.post("/api/timers", json={"pattern": "10m"})

    response = client.post("/api/timers/1/pause")
    assert response.status_code == 200
    assert response.json()["affected_ids"] == ["1"]

    assert client.post("/api/timers/1/pause").status_code == 409
    assert client.post("/api/timers/1/resume").status_code == 200
    assert client.delete("/api/timers/1").status_code == 200
    assert client.delete("/api/timers/1").status_code == 404


def test_remove_done_when_empty(client):
    response = client.delete("/api/timers/done")

    assert response.status_code == 200
    assert response.json()["affected_ids"] == []


def test_presets(client):
    body = client.get("/api/presets").json()

    assert body["count"] == len(body["presets"])
    assert "pomodoro" in {p["name"] for p in body["presets"]}


def test_preview(client, state_file):
    response = client.post("/api/sequences/preview", json={"pattern": "(10m a, 5m b)x2"})

    assert response.status_code == 200
    body = response.json()
    assert len(body["phases"]) == 4
    assert body["summary"]["total_seconds"] == 1800
    assert not state_file.exists()


def test_preview_without_phases(client):
    response = client.post("/api/sequences/preview", json={"pattern": "(work)x2"})

    assert response.status_code == 400

import pytest
from fastapi.testclient import TestClient

from timekeeper.errors import InputError, TimerNotFoundError
from timekeeper.infra.api_client import TimerApiClient
from timekeeper.main import create_app
from timekeeper.models import TimerState


@pytest.fixture
def api(settings, controller):
    # TestClient is an httpx.Client, so it can stand in for the daemon connection
    with TestClient(create_app(settings=settings, controller=controller)) as test_client:
        yield TimerApiClient(settings.api_url, client=test_client)


def test_is_available(api):
    assert api.is_available()


def test_create_and_list(api):
    result = api.create("(10m a, 5m b)x2", message="Focus")

    assert result.success
    assert result.timer.is_sequence
    assert result.summary.phase_count == 4

    listing = api.list_timers()
    assert listing.count == 1
    assert listing.timers[0].timer.message == "Focus"
    assert listing.timers[0].phase_position == "1/4"


def test_create_failure_is_a_result(api):
    result = api.create("nonsense")

    assert not result.success
    assert "nonsense" in result.message


def test_get_timer_not_found(api):
    with pytest.raises(TimerNotFoundError):
        api.get_timer("5")


def test_actions(api):
    api.create("10m")

    assert api.pause("1").success
    assert api.get_timer("1").timer.state == TimerState.PAUSED

    again = api.pause("1")
    assert not again.success
    assert again.error == "invalid_state"

    missing = api.resume("8")
    assert not missing.success
    assert missing.error == "not_found"

    assert api.remove("all").affected_ids == ["1"]


def test_presets_and_preview(api):
    assert "sprint" in {p.name for p in api.list_presets()}

    preview = api.preview("sprint")
    assert preview.resolved_pattern == "(15m work, 3m rest)x4"
    assert len(preview.phases) == 8

    with pytest.raises(InputError):
        api.preview("(rest)x3")


def test_unreachable_daemon():
    client = TimerApiClient("http://127.0.0.1:9", timeout=0.2)
    try:
        assert not client.is_available()
    finally:
        client.close()

import json

import pytest

from timekeeper.cli import format_preview, main, progress_bar, serve_address
from timekeeper.config import Settings


@pytest.fixture
def local_state(monkeypatch, state_file):
    monkeypatch.setenv("TIMEKEEPER_STATE_FILE", str(state_file))
    monkeypatch.delenv("TIMEKEEPER_PRESETS_FILE", raising=False)
    return state_file


def test_progress_bar():
    assert progress_bar(0, width=4) == "[....]"
    assert progress_bar(50, width=4) == "[##..]"
    assert progress_bar(100, width=4) == "[####]"
    assert progress_bar(-1, width=4) == "[????]"


def test_start_and_list(local_state, capsys):
    assert main(["--local", "start", "25m", "-m", "Tea"]) == 0
    out, err = capsys.readouterr()
    assert "Timer 1 started" in out
    assert "daemon is not running" in err

    assert main(["--local", "list"]) == 0
    out, _ = capsys.readouterr()
    assert "Tea" in out
    assert "Running" in out

    records = json.loads(local_state.read_text())
    assert records[0]["message"] == "Tea"


def test_start_invalid(local_state, capsys):
    assert main(["--local", "start", "later"]) == 1
    assert "Invalid duration" in capsys.readouterr().out


def test_pause_resume_remove(local_state, capsys):
    main(["--local", "start", "10m"])

    assert main(["--local", "pause", "1"]) == 0
    assert main(["--local", "pause", "1"]) == 1
    assert main(["--local", "resume", "all"]) == 0
    assert main(["--local", "remove", "1"]) == 0
    assert not local_state.exists()

    assert main(["--local", "remove", "1"]) == 1
    assert "not found" in capsys.readouterr().out


def test_empty_list(local_state, capsys):
    assert main(["--local", "list"]) == 0
    assert "No timers." in capsys.readouterr().out


def test_presets(local_state, capsys):
    assert main(["--local", "presets"]) == 0
    assert "pomodoro" in capsys.readouterr().out


def test_preview(local_state, capsys):
    assert main(["--local", "preview", "pomodoro"]) == 0
    out, _ = capsys.readouterr()
    assert "pomodoro = (25m work, 5m rest)x4" in out
    assert "8 phases, 2h total: 4x work, 4x rest" in out
    assert not local_state.exists()


def test_preview_without_phases(local_state, capsys):
    assert main(["--local", "preview", "(rest)x2"]) == 1
    assert "No phases" in capsys.readouterr().err


def test_watch_single_timer_not_found(local_state, capsys):
    assert main(["--local", "watch", "3"]) == 0


def test_format_preview_shows_loops(controller):
    text = format_preview(controller.preview("(1m a)x2, 30s b"))

    assert "[loop 1 2/2]" in text
    assert "3 phases, 2m 30s total: 2x a, b" in text


def test_serve_uses_configured_api_url(monkeypatch):
    calls = []
    monkeypatch.setenv("TIMEKEEPER_API_URL", "http://127.0.0.1:9123")
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main(["serve"]) == 0
    assert calls == [("timekeeper.main:app", {"host": "127.0.0.1", "port": 9123})]


def test_serve_flags_override_settings(monkeypatch):
    calls = []
    monkeypatch.setenv("TIMEKEEPER_API_URL", "http://127.0.0.1:9123")
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))

    assert main(["serve", "--host", "0.0.0.0", "--port", "8000"]) == 0
    assert calls == [{"host": "0.0.0.0", "port": 8000}]


def test_serve_address_defaults():
    assert serve_address(Settings()) == ("127.0.0.1", 8765)
    assert serve_address(Settings(api_url="http://localhost")) == ("localhost", 80)

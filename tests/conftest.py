from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from timekeeper.config import Settings
from timekeeper.infra.state_store import TimerStateStore
from timekeeper.services.presets.default_presets import DEFAULT_PRESETS
from timekeeper.services.presets.preset_resolver import PresetResolver
from timekeeper.services.scheduler import ManualScheduler
from timekeeper.services.timer import TimerController

START = datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "timers.json"


@pytest.fixture
def store(state_file: Path) -> TimerStateStore:
    return TimerStateStore(state_file)


@pytest.fixture
def resolver() -> PresetResolver:
    return PresetResolver(DEFAULT_PRESETS)


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock=clock)


@pytest.fixture
def controller(store, scheduler, resolver, clock) -> TimerController:
    return TimerController(store=store, scheduler=scheduler, resolver=resolver, clock=clock)


@pytest.fixture
def settings(state_file: Path) -> Settings:
    return Settings(state_file=state_file, api_url="http://testserver")

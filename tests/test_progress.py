from datetime import datetime, timedelta, timezone

from timekeeper.models import Timer, TimerState
from timekeeper.services.timer import NOT_APPLICABLE, compute_progress, remaining_seconds
from timekeeper.utils.datetime_helper import to_iso

START = datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


def make_timer(**overrides):
    fields = dict(
        id="1",
        duration_text="10m",
        seconds=600,
        start_time=to_iso(START),
        end_time=to_iso(START + timedelta(seconds=600)),
    )
    fields.update(overrides)
    return Timer(**fields)


def test_running_progress():
    timer = make_timer()

    assert compute_progress(timer, START) == 0
    assert compute_progress(timer, START + timedelta(seconds=150)) == 25
    assert compute_progress(timer, START + timedelta(seconds=599)) == 99
    assert compute_progress(timer, START + timedelta(seconds=900)) == 100


def test_running_before_start_clamps_to_zero():
    assert compute_progress(make_timer(), START - timedelta(seconds=60)) == 0


def test_running_with_unreadable_start():
    assert compute_progress(make_timer(start_time="earlier"), START + timedelta(seconds=300)) == 0


def test_running_progress_restarts_after_resume(controller, clock):
    controller.create("10m")
    clock.advance(300)
    controller.pause("1")
    clock.advance(5)
    controller.resume("1")

    timer = controller.store.get("1")
    assert compute_progress(timer, clock.now) == 0
    assert remaining_seconds(timer, clock.now) == 300
    assert compute_progress(timer, clock.now + timedelta(seconds=60)) == 10


def test_completed_is_always_100():
    timer = make_timer(state=TimerState.COMPLETED)

    assert compute_progress(timer, START) == 100
    assert remaining_seconds(timer, START) == 0


def test_paused_uses_stored_remaining():
    timer = make_timer(state=TimerState.PAUSED, remaining_seconds=150)
    later = START + timedelta(hours=3)

    assert compute_progress(timer, later) == 75
    assert remaining_seconds(timer, later) == 150


def test_paused_with_full_remaining_is_zero():
    timer = make_timer(state=TimerState.PAUSED, remaining_seconds=600)

    assert compute_progress(timer, START) == 0


def test_lost_with_nothing_remaining():
    timer = make_timer(state=TimerState.LOST, remaining_seconds=0)

    assert compute_progress(timer, START) == 100
    assert remaining_seconds(timer, START) == 0


def test_unknown_state_is_not_applicable():
    timer = make_timer().model_copy(update={"state": "Snoozed"})

    assert compute_progress(timer, START) == NOT_APPLICABLE


def test_remaining_rounds_up():
    timer = make_timer()

    assert remaining_seconds(timer, START + timedelta(seconds=0.5)) == 600

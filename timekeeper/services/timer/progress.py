"""Progress and remaining-time calculations for display"""
import math
from datetime import datetime

from timekeeper.models.timer import Timer, TimerState
from timekeeper.utils.datetime_helper import parse_iso

NOT_APPLICABLE = -1


def seconds_until_end(timer: Timer, now: datetime) -> int:
    """Whole seconds left before end_time, rounded up; 0 if passed or unreadable"""
    end = parse_iso(timer.end_time)
    if end is None:
        return 0
    return max(0, math.ceil((end - now).total_seconds()))


def remaining_seconds(timer: Timer, now: datetime) -> int:
    """Seconds left in the current segment as the user would see them"""
    if timer.state == TimerState.RUNNING:
        return seconds_until_end(timer, now)
    if timer.state in (TimerState.PAUSED, TimerState.LOST):
        return max(0, timer.remaining_seconds or 0)
    return 0


def compute_progress(timer: Timer, now: datetime) -> int:
    """
    Percentage of the current segment already done.

    Completed is always 100. Running is (now - start) / seconds, so a
    resumed segment starts again from 0. Paused and Lost use the stored
    remaining seconds. Any other state gives -1 (not applicable).

    Returns:
        Integer percentage clamped to [0, 100], or -1
    """
    if timer.state == TimerState.COMPLETED:
        return 100
    if timer.state not in (TimerState.RUNNING, TimerState.PAUSED, TimerState.LOST):
        return NOT_APPLICABLE
    if timer.seconds <= 0:
        return 0

    if timer.state == TimerState.RUNNING:
        start = parse_iso(timer.start_time)
        if start is None:
            return 0
        done = (now - start).total_seconds()
    else:
        done = timer.seconds - (timer.remaining_seconds or 0)

    percent = done / timer.seconds * 100
    return int(max(0, min(100, percent)))

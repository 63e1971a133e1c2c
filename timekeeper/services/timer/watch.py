"""Polling loop behind live timer displays"""
import logging
import time
from typing import Callable, Optional, Protocol

from timekeeper.errors import TimerNotFoundError
from timekeeper.models.results import TimerListResult, TimerView
from timekeeper.models.timer import TimerState

logger = logging.getLogger(__name__)

POLL_STEP_SECONDS = 0.05


class TimerSource(Protocol):
    """Anything that can list timers: the controller or the daemon client"""

    def list_timers(self, include_all: bool = False) -> TimerListResult: ...

    def get_timer(self, timer_id: str) -> TimerView: ...


def watch_timers(
    source: TimerSource,
    on_frame: Callable[[TimerListResult], None],
    should_stop: Callable[[], bool],
    timer_id: Optional[str] = None,
    include_all: bool = False,
    interval: float = 1.0,
    max_frames: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Render timers every `interval` seconds until stopped.

    Each frame re-lists from the source; the store skips re-parsing
    while the state file is unchanged. `should_stop` is checked between
    short sleeps so a key press ends the loop without waiting for the next
    frame. Watching a single timer also ends once it is completed or removed.

    Args:
        source: Controller or daemon client to read from
        on_frame: Receives each frame
        should_stop: Returns True to end the loop (e.g. a key was pressed)
        timer_id: Watch only this timer
        include_all: Include completed timers in full listings
        interval: Seconds between frames
        max_frames: Stop after this many frames
        sleep: Sleep function

    Returns:
        Number of frames rendered
    """
    frames = 0
    while True:
        if timer_id is None:
            frame = source.list_timers(include_all=include_all)
            finished = False
        else:
            try:
                view = source.get_timer(timer_id)
            except TimerNotFoundError:
                logger.info(f"Timer {timer_id} is gone, stopping watch")
                return frames
            frame = TimerListResult(timers=[view], count=1)
            finished = view.timer.state == TimerState.COMPLETED

        on_frame(frame)
        frames += 1

        if finished or (max_frames is not None and frames >= max_frames):
            return frames
        if should_stop():
            return frames

        waited = 0.0
        while waited < interval:
            if should_stop():
                return frames
            step = min(POLL_STEP_SECONDS, interval - waited)
            sleep(step)
            waited += step

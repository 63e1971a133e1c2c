"""Event-loop scheduler for the long-running daemon."""
import asyncio
import logging
from datetime import datetime
from typing import Dict, Optional

from timekeeper.utils.datetime_helper import Clock, utc_now
from .base import FireCallback, SchedulerAdapter

logger = logging.getLogger(__name__)


class AsyncioScheduler(SchedulerAdapter):
    """
    Schedules jobs with loop.call_later.

    The loop keeps its pending deadlines in a heap, so the daemon hosting
    this scheduler is the process that outlives short CLI invocations.
    Jobs are lost if the daemon stops; reconciliation reports them as Lost.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, clock: Clock = utc_now):
        self._loop = loop
        self._clock = clock
        self._handles: Dict[str, asyncio.TimerHandle] = {}
        self._last_fired: Dict[str, datetime] = {}

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def submit(self, timer_id: str, fire_after_seconds: int, on_fire: FireCallback) -> None:
        self.cancel(timer_id)
        loop = self._loop or asyncio.get_running_loop()
        self._handles[timer_id] = loop.call_later(
            max(0, fire_after_seconds), self._fire, timer_id, on_fire
        )
        logger.debug(f"Scheduled timer {timer_id} in {fire_after_seconds}s")

    def cancel(self, timer_id: str) -> None:
        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

    def exists(self, timer_id: str) -> bool:
        return timer_id in self._handles

    def last_fired_at(self, timer_id: str) -> Optional[datetime]:
        return self._last_fired.get(timer_id)

    def shutdown(self) -> None:
        for timer_id in list(self._handles):
            self.cancel(timer_id)

    def _fire(self, timer_id: str, on_fire: FireCallback) -> None:
        self._handles.pop(timer_id, None)
        self._last_fired[timer_id] = self._clock()
        try:
            on_fire(timer_id)
        except Exception as e:
            logger.error(f"Error handling fire for timer {timer_id}: {e}")
            raise

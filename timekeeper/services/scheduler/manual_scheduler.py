"""In-memory scheduler whose jobs are fired explicitly."""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from timekeeper.utils.datetime_helper import Clock, add_seconds, utc_now
from .base import FireCallback, SchedulerAdapter

logger = logging.getLogger(__name__)


class ManualScheduler(SchedulerAdapter):
    """
    Keeps jobs in a dict and runs them only when told to.

    Useful for embedding the timer engine in a caller that owns its own
    loop, and for driving timers deterministically.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._jobs: Dict[str, Tuple[datetime, int, FireCallback]] = {}
        self._last_fired: Dict[str, datetime] = {}

    def submit(self, timer_id: str, fire_after_seconds: int, on_fire: FireCallback) -> None:
        fire_at = add_seconds(self._clock(), fire_after_seconds)
        self._jobs[timer_id] = (fire_at, fire_after_seconds, on_fire)

    def cancel(self, timer_id: str) -> None:
        self._jobs.pop(timer_id, None)

    def exists(self, timer_id: str) -> bool:
        return timer_id in self._jobs

    def last_fired_at(self, timer_id: str) -> Optional[datetime]:
        return self._last_fired.get(timer_id)

    def delay_of(self, timer_id: str) -> Optional[int]:
        """Delay the pending job was submitted with"""
        job = self._jobs.get(timer_id)
        return job[1] if job else None

    def fire(self, timer_id: str) -> bool:
        """Run the job for timer_id now. Returns False if none is pending."""
        job = self._jobs.pop(timer_id, None)
        if job is None:
            return False
        self._last_fired[timer_id] = self._clock()
        job[2](timer_id)
        return True

    def run_due(self) -> List[str]:
        """Fire every job whose time has come, in deadline order"""
        now = self._clock()
        due = sorted(
            (fire_at, timer_id) for timer_id, (fire_at, _, _) in self._jobs.items() if fire_at <= now
        )
        fired = []
        for _, timer_id in due:
            if self.fire(timer_id):
                fired.append(timer_id)
        return fired

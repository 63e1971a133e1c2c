"""Scheduler used when no background runner is available."""
import logging
from datetime import datetime
from typing import Optional

from .base import FireCallback, SchedulerAdapter

logger = logging.getLogger(__name__)


class NullScheduler(SchedulerAdapter):
    """Accepts jobs and never runs them. Timers end up Lost on reconcile."""

    def submit(self, timer_id: str, fire_after_seconds: int, on_fire: FireCallback) -> None:
        logger.debug(f"No scheduler available; timer {timer_id} will not fire in {fire_after_seconds}s")

    def cancel(self, timer_id: str) -> None:
        pass

    def exists(self, timer_id: str) -> bool:
        return False

    def last_fired_at(self, timer_id: str) -> Optional[datetime]:
        return None

"""Base class for delayed-callback schedulers."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

# Called with the timer id once the job's delay has elapsed
FireCallback = Callable[[str], None]


class SchedulerAdapter(ABC):
    """
    Runs one pending job per timer id.

    Submitting for an id that already has a job replaces it. Implementations
    must not raise from submit when they merely cannot guarantee firing; a
    job that never fires is detected later by reconciliation (Lost state).
    """

    @abstractmethod
    def submit(self, timer_id: str, fire_after_seconds: int, on_fire: FireCallback) -> None:
        """Arrange for on_fire(timer_id) after the given delay"""

    @abstractmethod
    def cancel(self, timer_id: str) -> None:
        """Drop the pending job for timer_id, if any"""

    @abstractmethod
    def exists(self, timer_id: str) -> bool:
        """True while a job for timer_id is pending"""

    @abstractmethod
    def last_fired_at(self, timer_id: str) -> Optional[datetime]:
        """When the job for timer_id last fired, if known"""

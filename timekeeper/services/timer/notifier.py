"""Notifications emitted after timer transitions have been saved"""
import logging
from abc import ABC, abstractmethod
from enum import Enum

from timekeeper.models.timer import Timer

logger = logging.getLogger(__name__)


class TimerEvent(str, Enum):
    PHASE_STARTED = "phase_started"
    REPEAT_STARTED = "repeat_started"
    COMPLETED = "completed"


class Notifier(ABC):
    """Receives timer events. Called only once the new state is persisted."""

    @abstractmethod
    def notify(self, timer: Timer, event: TimerEvent) -> None:
        """Deliver a notification for the event"""


class LogNotifier(Notifier):
    """Writes notifications to the log"""

    def notify(self, timer: Timer, event: TimerEvent) -> None:
        if event == TimerEvent.COMPLETED:
            logger.info(f"Timer {timer.id} finished: {timer.message}")
        elif event == TimerEvent.PHASE_STARTED:
            logger.info(
                f"Timer {timer.id} phase {(timer.current_phase_index or 0) + 1}/{timer.total_phases}: "
                f"{timer.current_phase_label} ({timer.duration_text})"
            )
        else:
            logger.info(f"Timer {timer.id} run {timer.current_run}/{timer.repeat_total}: {timer.message}")

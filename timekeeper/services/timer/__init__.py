from .notifier import LogNotifier, Notifier, TimerEvent
from .progress import compute_progress, remaining_seconds, NOT_APPLICABLE
from .timer_controller import TimerController, ALL_TIMERS, DONE_TIMERS
from .watch import watch_timers

__all__ = [
    "LogNotifier", "Notifier", "TimerEvent",
    "compute_progress", "remaining_seconds", "NOT_APPLICABLE",
    "TimerController", "ALL_TIMERS", "DONE_TIMERS",
    "watch_timers",
]

"""Services module"""

from timekeeper.services.presets import PresetResolver, build_preset_resolver
from timekeeper.services.scheduler import AsyncioScheduler, ManualScheduler, NullScheduler, SchedulerAdapter
from timekeeper.services.timer import TimerController
from timekeeper.services.timer.factory import build_controller

__all__ = [
    "PresetResolver",
    "build_preset_resolver",
    "AsyncioScheduler",
    "ManualScheduler",
    "NullScheduler",
    "SchedulerAdapter",
    "TimerController",
    "build_controller",
]

"""Wires a TimerController from settings"""
from typing import Optional

from timekeeper.config import Settings
from timekeeper.infra.state_store import TimerStateStore
from timekeeper.services.presets.preset_resolver import build_preset_resolver
from timekeeper.services.scheduler.base import SchedulerAdapter
from timekeeper.services.scheduler.null_scheduler import NullScheduler
from .notifier import Notifier
from .timer_controller import TimerController


def build_controller(
    settings: Settings,
    scheduler: Optional[SchedulerAdapter] = None,
    notifier: Optional[Notifier] = None,
) -> TimerController:
    """Controller over the configured state file; NullScheduler when none is given"""
    return TimerController(
        store=TimerStateStore(settings.state_file),
        scheduler=scheduler or NullScheduler(),
        resolver=build_preset_resolver(settings),
        notifier=notifier,
    )

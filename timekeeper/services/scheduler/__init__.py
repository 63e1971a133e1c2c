from .base import FireCallback, SchedulerAdapter
from .null_scheduler import NullScheduler
from .manual_scheduler import ManualScheduler
from .asyncio_scheduler import AsyncioScheduler

__all__ = ["FireCallback", "SchedulerAdapter", "NullScheduler", "ManualScheduler", "AsyncioScheduler"]

# API module exports
from timekeeper.api import health, timers
from timekeeper.api.base import api_router

__all__ = ["health", "timers", "api_router"]

from .state_store import TimerStateStore

__all__ = ["TimerStateStore"]

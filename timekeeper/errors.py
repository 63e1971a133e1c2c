"""Exceptions raised by timer commands"""


class TimekeeperError(Exception):
    """Base class for recoverable command failures"""


class InputError(TimekeeperError, ValueError):
    """Duration or sequence pattern could not be turned into a positive duration"""


class TimerNotFoundError(TimekeeperError, LookupError):
    """Command referenced a timer id that is not in the store"""

    def __init__(self, timer_id: str):
        super().__init__(f"Timer {timer_id} not found")
        self.timer_id = timer_id

"""Timekeeper - countdown timers and Pomodoro-style sequences"""

__version__ = "1.0.0"

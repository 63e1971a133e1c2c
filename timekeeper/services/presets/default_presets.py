"""Built-in sequence presets"""
from typing import List

from timekeeper.models.preset import Preset

DEFAULT_PRESETS: List[Preset] = [
    Preset(
        name="pomodoro",
        pattern="(25m work, 5m rest)x4",
        description="Four 25 minute work blocks with 5 minute rests",
    ),
    Preset(
        name="pomodoro-long",
        pattern="(25m work, 5m rest)x3, 25m work, 30m 'long break'",
        description="Classic pomodoro set ending in a 30 minute break",
    ),
    Preset(
        name="52-17",
        pattern="(52m work, 17m rest)x3",
        description="52 minutes on, 17 minutes off",
    ),
    Preset(
        name="90-20",
        pattern="(90m work, 20m rest)x2",
        description="Ultradian 90 minute focus cycles",
    ),
    Preset(
        name="sprint",
        pattern="(15m work, 3m rest)x4",
        description="Short sprints for low-energy days",
    ),
]

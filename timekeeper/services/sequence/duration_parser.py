"""Compact duration parsing ("1h20m30s") and formatting"""
import re

HOURS_PATTERN = re.compile(r'(\d+)h')
MINUTES_PATTERN = re.compile(r'(\d+)m')
SECONDS_PATTERN = re.compile(r'(\d+)s')
BARE_SECONDS_PATTERN = re.compile(r'^\d+$')


def parse_duration(text: str) -> int:
    """
    Convert a compact duration token to seconds.

    Each unit is matched independently and summed, so "30m1h" and "1h30m"
    both give 5400. A bare integer is taken as raw seconds.

    Args:
        text: Duration such as "25m", "1h30m", "90s" or "300"

    Returns:
        Total seconds, or 0 when nothing recognisable was found.
        Callers treat 0 as invalid input.
    """
    if not text:
        return 0

    text = text.strip()
    total = 0
    matched = False

    for pattern, factor in ((HOURS_PATTERN, 3600), (MINUTES_PATTERN, 60), (SECONDS_PATTERN, 1)):
        match = pattern.search(text)
        if match:
            total += int(match.group(1)) * factor
            matched = True

    if matched:
        return total

    if BARE_SECONDS_PATTERN.match(text):
        return int(text)

    return 0


def format_duration(seconds: int) -> str:
    """Render seconds as "1h 5m 3s", omitting zero units ("0s" for zero)."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_clock(seconds: int) -> str:
    """Render seconds as a countdown clock, "1:05:03" or "05:03"."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"

"""日時ヘルパー関数（状態ファイルのタイムスタンプはUTCオフセット付きISO-8601文字列）"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time, timezone-aware in UTC"""
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """
    Serialize a datetime for the state file.

    Args:
        dt: datetime (naive values are taken as UTC)

    Returns:
        ISO-8601 string with offset, microsecond precision
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat(timespec="microseconds")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored timestamp.

    Returns:
        Aware datetime, or None when the value is missing or malformed
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def add_seconds(dt: datetime, seconds: int) -> datetime:
    return dt + timedelta(seconds=seconds)


def format_local_time(value: Optional[str]) -> str:
    """Render a stored timestamp as local wall-clock "HH:MM:SS" ("--" if unreadable)"""
    dt = parse_iso(value)
    if dt is None:
        return "--"
    return dt.astimezone().strftime("%H:%M:%S")

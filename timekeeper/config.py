import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

DEFAULT_STATE_FILE = Path.home() / ".timekeeper" / "timers.json"
DEFAULT_API_URL = "http://127.0.0.1:8765"


class Settings(BaseModel):
    """Runtime configuration, read from the environment (and .env)"""
    state_file: Path = DEFAULT_STATE_FILE
    presets_file: Optional[Path] = None
    log_level: str = "INFO"
    api_url: str = DEFAULT_API_URL
    watch_interval: float = 1.0  # seconds between watch refreshes


def get_settings() -> Settings:
    """Build settings from TIMEKEEPER_* environment variables"""
    state_file = os.getenv("TIMEKEEPER_STATE_FILE")
    presets_file = os.getenv("TIMEKEEPER_PRESETS_FILE")

    return Settings(
        state_file=Path(state_file).expanduser() if state_file else DEFAULT_STATE_FILE,
        presets_file=Path(presets_file).expanduser() if presets_file else None,
        log_level=os.getenv("TIMEKEEPER_LOG_LEVEL", "INFO").upper(),
        api_url=os.getenv("TIMEKEEPER_API_URL", DEFAULT_API_URL),
        watch_interval=float(os.getenv("TIMEKEEPER_WATCH_INTERVAL", "1.0")),
    )

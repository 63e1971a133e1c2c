"""JSON file persistence for the timer collection"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from timekeeper.models.timer import Timer

logger = logging.getLogger(__name__)


class TimerStateStore:
    """
    Whole-file store for all timers.

    The file holds one JSON array of timer records. A missing file and an
    empty array both mean "no timers"; saving an empty collection deletes
    the file. Unreadable content loads as an empty collection.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so readers never see a half-written file. There
    is no locking: concurrent writers are last-writer-wins.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._cache_key: Optional[Tuple[int, int]] = None
        self._cache: List[Timer] = []

    def load(self) -> List[Timer]:
        """
        Load all timers.

        The parsed collection is cached against the file's modification time
        and size, so repeated polling of an unchanged file skips parsing.

        Returns:
            Fresh Timer objects the caller may mutate
        """
        key = self._file_key()
        if key is None:
            self._cache_key = None
            self._cache = []
            return []

        if key != self._cache_key:
            self._cache = self._parse(self._read_raw())
            self._cache_key = key

        return [timer.model_copy(deep=True) for timer in self._cache]

    def has_changed(self) -> bool:
        """True if the file differs from what was last loaded"""
        return self._file_key() != self._cache_key

    def save(self, timers: Iterable[Timer]) -> None:
        """Replace the stored collection with `timers`"""
        records = [timer.to_record() for timer in timers]
        self._cache_key = None

        if not records:
            self.clear()
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except Exception:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

        logger.debug(f"Saved {len(records)} timers to {self.path}")

    def clear(self) -> None:
        """Remove the state file"""
        self._cache_key = None
        self._cache = []
        try:
            self.path.unlink()
            logger.debug(f"Removed empty state file {self.path}")
        except FileNotFoundError:
            pass

    def get(self, timer_id: str) -> Optional[Timer]:
        for timer in self.load():
            if timer.id == timer_id:
                return timer
        return None

    @staticmethod
    def next_id(timers: Iterable[Timer]) -> str:
        """max(numeric ids) + 1, or "1" for an empty collection"""
        numeric_ids = [int(t.id) for t in timers if t.id.isdigit()]
        return str(max(numeric_ids) + 1) if numeric_ids else "1"

    def _file_key(self) -> Optional[Tuple[int, int]]:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        return (stat.st_mtime_ns, stat.st_size)

    def _read_raw(self) -> Any:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read state file {self.path}: {e}")
            return []
        except UnicodeDecodeError as e:
            logger.warning(f"State file {self.path} is not valid UTF-8, treating as empty: {e}")
            return []
        if not text.strip():
            return []
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"State file {self.path} is corrupt, treating as empty: {e}")
            return []

    def _parse(self, raw: Any) -> List[Timer]:
        # a single object is accepted as a one-element collection
        if isinstance(raw, dict):
            raw = [raw]
        if not isinstance(raw, list):
            logger.warning(f"State file {self.path} does not hold a list, treating as empty")
            return []

        timers: List[Timer] = []
        for item in raw:
            try:
                timers.append(Timer.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable timer record: {e.error_count()} errors")
        return timers

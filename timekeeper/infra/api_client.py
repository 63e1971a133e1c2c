"""HTTP client for the timer daemon"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from timekeeper.errors import InputError, TimerNotFoundError
from timekeeper.models import CreateTimerResult, Preset, SequencePreview, TimerActionResult, TimerListResult, TimerView

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class TimerApiClient:
    """
    Talks to the daemon's /api routes and returns the same result models
    as TimerController, so the CLI can use either interchangeably.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def is_available(self) -> bool:
        """True if the daemon answers its health check"""
        try:
            response = self._client.get("/api/health/", timeout=1.0)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.debug(f"Timer daemon not reachable: {e}")
            return False

    def create(self, pattern: str, message: str = "", repeat: int = 1) -> CreateTimerResult:
        response = self._client.post(
            "/api/timers", json={"pattern": pattern, "message": message, "repeat": repeat}
        )
        if response.status_code == 400:
            return CreateTimerResult(success=False, message=self._detail(response))
        response.raise_for_status()
        return CreateTimerResult.model_validate(response.json())

    def list_timers(self, include_all: bool = False) -> TimerListResult:
        response = self._client.get("/api/timers", params={"include_all": include_all})
        response.raise_for_status()
        return TimerListResult.model_validate(response.json())

    def get_timer(self, timer_id: str) -> TimerView:
        response = self._client.get(f"/api/timers/{timer_id}")
        if response.status_code == 404:
            raise TimerNotFoundError(timer_id)
        response.raise_for_status()
        return TimerView.model_validate(response.json())

    def pause(self, target: str) -> TimerActionResult:
        return self._action(self._client.post(f"/api/timers/{target}/pause"))

    def resume(self, target: str) -> TimerActionResult:
        return self._action(self._client.post(f"/api/timers/{target}/resume"))

    def remove(self, target: str) -> TimerActionResult:
        return self._action(self._client.delete(f"/api/timers/{target}"))

    def list_presets(self) -> List[Preset]:
        response = self._client.get("/api/presets")
        response.raise_for_status()
        return [Preset.model_validate(item) for item in response.json()["presets"]]

    def preview(self, pattern: str) -> SequencePreview:
        response = self._client.post("/api/sequences/preview", json={"pattern": pattern})
        if response.status_code == 400:
            raise InputError(self._detail(response))
        response.raise_for_status()
        return SequencePreview.model_validate(response.json())

    def _action(self, response: httpx.Response) -> TimerActionResult:
        if response.status_code == 404:
            return TimerActionResult(success=False, message=self._detail(response), error="not_found")
        if response.status_code == 409:
            return TimerActionResult(success=False, message=self._detail(response), error="invalid_state")
        response.raise_for_status()
        return TimerActionResult.model_validate(response.json())

    @staticmethod
    def _detail(response: httpx.Response) -> str:
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            return response.text
        return str(body.get("detail", response.text))

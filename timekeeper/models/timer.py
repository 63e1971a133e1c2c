"""Timer domain model"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .sequence import Phase


class TimerState(str, Enum):
    """Timer lifecycle state"""
    RUNNING = "Running"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    LOST = "Lost"


# Attributes only written for sequence timers
SEQUENCE_FIELDS = {
    "sequence_pattern",
    "phases",
    "current_phase_index",
    "total_phases",
    "current_phase_label",
    "total_sequence_seconds",
    "message_from_label",
}


class Timer(BaseModel):
    """
    Persisted timer record.

    Field aliases are the canonical camelCase names of the state file.
    Timestamps are ISO-8601 strings; they are parsed on demand so a damaged
    value surfaces as a Lost timer instead of a load failure.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    duration_text: str = Field(..., alias="durationText")
    seconds: int  # duration of the current segment
    message: str = ""
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    repeat_total: int = Field(1, alias="repeatTotal")
    repeat_remaining: int = Field(0, alias="repeatRemaining")
    current_run: int = Field(1, alias="currentRun")
    state: TimerState = TimerState.RUNNING
    remaining_seconds: Optional[int] = Field(None, alias="remainingSeconds")
    is_sequence: bool = Field(False, alias="isSequence")

    # Sequence-only
    sequence_pattern: Optional[str] = Field(None, alias="sequencePattern")
    phases: Optional[List[Phase]] = None
    current_phase_index: Optional[int] = Field(None, alias="currentPhaseIndex")
    total_phases: Optional[int] = Field(None, alias="totalPhases")
    current_phase_label: Optional[str] = Field(None, alias="currentPhaseLabel")
    total_sequence_seconds: Optional[int] = Field(None, alias="totalSequenceSeconds")
    # True while message mirrors the current phase label; absent in older records
    message_from_label: Optional[bool] = Field(None, alias="messageFromLabel")

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the on-disk JSON shape"""
        exclude = None if self.is_sequence else SEQUENCE_FIELDS
        return self.model_dump(by_alias=True, mode="json", exclude=exclude)

    def has_next_phase(self) -> bool:
        return (
            self.is_sequence
            and bool(self.phases)
            and self.current_phase_index is not None
            and self.current_phase_index + 1 < len(self.phases)
        )

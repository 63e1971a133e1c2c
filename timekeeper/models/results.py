"""Structured results returned by timer commands"""
from typing import List, Optional
from pydantic import BaseModel, Field

from .sequence import Phase, SequenceSummary
from .timer import Timer


class TimerView(BaseModel):
    """A timer together with values derived at read time"""
    timer: Timer
    progress: int  # 0-100, or -1 when not applicable
    remaining_seconds: int
    remaining_text: str
    phase_position: Optional[str] = None  # "3/8" for sequences


class CreateTimerResult(BaseModel):
    """Result of a create command"""
    success: bool
    message: str
    timer: Optional[Timer] = None
    summary: Optional[SequenceSummary] = None


class TimerActionResult(BaseModel):
    """Result of pause/resume/remove over one or many timers"""
    success: bool
    message: str
    affected_ids: List[str] = Field(default_factory=list)
    skipped_ids: List[str] = Field(default_factory=list)
    error: Optional[str] = None  # "not_found" or "invalid_state" when success is False


class TimerListResult(BaseModel):
    """Result of a list command"""
    timers: List[TimerView]
    count: int


class SequencePreview(BaseModel):
    """Expanded phases of a pattern without creating a timer"""
    pattern: str
    resolved_pattern: str
    phases: List[Phase]
    summary: SequenceSummary

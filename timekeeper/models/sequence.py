"""Sequence models: parsed AST nodes, expanded phases and summaries"""
from typing import List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_PHASE_LABEL = "Timer"


class PhaseNode(BaseModel):
    """A single timed step in a parsed sequence"""
    kind: Literal["phase"] = "phase"
    seconds: int
    label: str = DEFAULT_PHASE_LABEL
    duration_text: str


class GroupNode(BaseModel):
    """A parenthesised group repeated `multiply` times"""
    kind: Literal["group"] = "group"
    items: List["AstNode"] = Field(default_factory=list)
    multiply: int = 1


AstNode = Union[PhaseNode, GroupNode]

GroupNode.model_rebuild()


class Phase(BaseModel):
    """One segment of an expanded sequence. Frozen once expanded."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    seconds: int = Field(..., gt=0)
    label: str
    original_duration_text: str = Field(..., alias="originalDurationText")
    loop_id: str = Field("", alias="loopId")
    loop_iteration: int = Field(1, alias="loopIteration", ge=1)
    loop_total: int = Field(1, alias="loopTotal", ge=1)


class SequenceSummary(BaseModel):
    """Derived totals for an expanded sequence (never persisted)"""
    total_seconds: int
    total_duration_text: str
    phase_count: int
    description: str

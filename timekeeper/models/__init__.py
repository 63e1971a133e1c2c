"""Domain models for the application"""
from .sequence import AstNode, GroupNode, Phase, PhaseNode, SequenceSummary, DEFAULT_PHASE_LABEL
from .preset import Preset
from .timer import Timer, TimerState, SEQUENCE_FIELDS
from .results import CreateTimerResult, SequencePreview, TimerActionResult, TimerListResult, TimerView

__all__ = [
    'AstNode', 'GroupNode', 'Phase', 'PhaseNode', 'SequenceSummary', 'DEFAULT_PHASE_LABEL',
    'Preset',
    'Timer', 'TimerState', 'SEQUENCE_FIELDS',
    'CreateTimerResult', 'SequencePreview', 'TimerActionResult', 'TimerListResult', 'TimerView',
]

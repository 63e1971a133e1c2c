"""Flatten parsed sequences into ordered phases with loop metadata"""
import logging
from typing import Dict, List, Sequence

from timekeeper.models.sequence import AstNode, GroupNode, Phase, PhaseNode, SequenceSummary
from .duration_parser import format_duration

logger = logging.getLogger(__name__)

# Patterns expanding past this are treated as typos
MAX_PHASES = 1000


def expand(
    ast: Sequence[AstNode],
    parent_loop_id: str = "",
    parent_iteration: int = 1,
    parent_total: int = 1,
) -> List[Phase]:
    """
    Expand AST nodes into the flat list of phases to execute.

    Groups are numbered among their siblings starting at 1, and a group's
    loop id is its parent's id plus "." plus its ordinal ("1", "1.2", ...).
    Output order is depth-first, left to right, which is execution order.

    Args:
        ast: Parsed nodes
        parent_loop_id: Loop id of the enclosing group ("" at top level)
        parent_iteration: 1-based iteration of the enclosing group
        parent_total: Repeat count of the enclosing group

    Returns:
        Phases in execution order
    """
    phases: List[Phase] = []
    group_ordinal = 0

    for node in ast:
        if isinstance(node, GroupNode):
            group_ordinal += 1
            loop_id = f"{parent_loop_id}.{group_ordinal}" if parent_loop_id else str(group_ordinal)
            for iteration in range(1, node.multiply + 1):
                phases.extend(expand(node.items, loop_id, iteration, node.multiply))
        elif isinstance(node, PhaseNode):
            if node.seconds <= 0:
                logger.debug(f"Dropping phase with unusable duration '{node.duration_text}'")
                continue
            phases.append(Phase(
                seconds=node.seconds,
                label=node.label,
                original_duration_text=node.duration_text,
                loop_id=parent_loop_id,
                loop_iteration=parent_iteration,
                loop_total=parent_total,
            ))

    return phases


def count_phases(ast: Sequence[AstNode]) -> int:
    """Number of phases `expand` would produce, computed without expanding"""
    total = 0
    for node in ast:
        if isinstance(node, GroupNode):
            total += max(0, node.multiply) * count_phases(node.items)
        elif isinstance(node, PhaseNode) and node.seconds > 0:
            total += 1
    return total


def summarize(phases: Sequence[Phase]) -> SequenceSummary:
    """Totals and a "4x work, 4x rest" style description of the phases"""
    total_seconds = sum(phase.seconds for phase in phases)

    # dicts keep first-seen order
    label_counts: Dict[str, int] = {}
    for phase in phases:
        label_counts[phase.label] = label_counts.get(phase.label, 0) + 1

    description = ", ".join(
        f"{count}x {label}" if count > 1 else label
        for label, count in label_counts.items()
    )

    return SequenceSummary(
        total_seconds=total_seconds,
        total_duration_text=format_duration(total_seconds),
        phase_count=len(phases),
        description=description,
    )

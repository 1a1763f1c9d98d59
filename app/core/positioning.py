# app/core/positioning.py
"""
Sparse ordering keys for tasks inside one (project, status) column.

Positions are handed out in steps of POSITION_STEP so that most moves can take
the midpoint between two neighbours without renumbering the column. When two
neighbours are adjacent the whole column is renumbered.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, List

POSITION_STEP = 10


@dataclass(frozen=True)
class PositionPlan:
    """Outcome of placing a task at a requested position"""
    position: int
    redistribute: bool = False


def next_append_position(max_position: Optional[int]) -> int:
    """
    Position for a task appended to the bottom of a column.

    Args:
        max_position: Highest position currently in the column, None if empty

    Returns:
        The first multiple of POSITION_STEP above max_position
    """
    if max_position is None:
        return POSITION_STEP
    return (max_position // POSITION_STEP) * POSITION_STEP + POSITION_STEP


def plan_insert(ordered_positions: Sequence[int], new_position: int) -> PositionPlan:
    """
    Decide the stored position for a task dropped at new_position.

    Args:
        ordered_positions: Current positions of the column, ascending
        new_position: Position requested by the caller

    Returns:
        PositionPlan with the final position and whether the column
        must be renumbered first
    """
    before, after = _neighbours(ordered_positions, new_position)

    if after is None and before is None:
        # Past the end of the column
        return PositionPlan(new_position)

    if before is None:
        # Front of the column; floor division, renumber when nothing fits below
        return PositionPlan(after // 2, redistribute=after < 2)

    if after is None:
        # Unreachable while _neighbours pairs every before with an after
        return PositionPlan(before + POSITION_STEP)

    gap = after - before
    return PositionPlan(before + gap // 2, redistribute=gap < 2)


def _neighbours(ordered_positions: Sequence[int], new_position: int):
    """
    Return (before, after): after is the first position >= new_position and
    before the one preceding it. Both are None when new_position is past the end.
    """
    for index, position in enumerate(ordered_positions):
        if position >= new_position:
            before = ordered_positions[index - 1] if index > 0 else None
            return before, position
    return None, None


def redistributed_positions(count: int) -> List[int]:
    """Evenly spaced positions 10, 20, ... for a column of count tasks"""
    return [(index + 1) * POSITION_STEP for index in range(count)]

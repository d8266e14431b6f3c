"""
Canvas position helpers.

New tables are placed at a candidate position (usually the last pointer
location). Only exact duplicates are avoided: two tables may overlap
visually, but never share the same top-left corner.
"""

from typing import Iterable

from schema_designer.exceptions import PositionUnavailableError
from schema_designer.graph.models import Position

DEFAULT_POSITION_STEP = 32.0
DEFAULT_MAX_POSITION_ATTEMPTS = 1000


def find_free_position(
    candidate: Position,
    occupied: Iterable[Position],
    *,
    step: float = DEFAULT_POSITION_STEP,
    max_attempts: int = DEFAULT_MAX_POSITION_ATTEMPTS,
) -> Position:
    """Find a position that does not coincide with any occupied one.

    The candidate is shifted by ``(step, step)`` until it is free.

    Args:
        candidate: Preferred position
        occupied: Positions of existing tables
        step: Diagonal offset applied after each collision
        max_attempts: Number of candidates to try before giving up

    Returns:
        The first free position

    Raises:
        PositionUnavailableError: If every attempted candidate collides
        ValueError: If step is zero or max_attempts is not positive
    """
    if step == 0:
        raise ValueError("step must be non-zero")
    if max_attempts <= 0:
        raise ValueError("max_attempts must be positive")

    taken = {(p.x, p.y) for p in occupied}
    position = candidate
    for _ in range(max_attempts):
        if (position.x, position.y) not in taken:
            return position
        position = Position(x=position.x + step, y=position.y + step)

    raise PositionUnavailableError(
        f"No free position within {max_attempts} attempts from "
        f"({candidate.x}, {candidate.y})"
    )

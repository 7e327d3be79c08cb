from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Tuple


class Direction(Enum):
    """Cardinal movement directions as (d_row, d_col) offsets."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def d_row(self) -> int:
        return self.value[0]

    @property
    def d_col(self) -> int:
        return self.value[1]


def next_position(row: int, col: int, direction: Optional[Direction]) -> Tuple[int, int]:
    """Return the candidate cell one step from (row, col).

    A ``None`` direction leaves the coordinates unchanged.
    """
    if direction is None:
        return row, col
    return row + direction.d_row, col + direction.d_col


def decode_command(command: str, keymap: Mapping[str, Direction]) -> Optional[Direction]:
    """Translate a single input command into a direction, or None if unbound."""
    return keymap.get(command)


__all__ = ["Direction", "next_position", "decode_command"]

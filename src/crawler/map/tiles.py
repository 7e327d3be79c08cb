from __future__ import annotations

from enum import Enum
from typing import FrozenSet


class Tile(Enum):
    """Enumeration for tile kinds in the dungeon grid.

    The enum values are the single-character tokens used by level files, so
    ``Tile("#")`` and ``Tile.PILLAR.token`` convert in either direction.

    The player marker replaces whatever terrain stood at the player's cell.
    No underlying terrain is remembered for that cell: when the player moves
    away it always becomes OPEN.
    """

    OPEN = "-"
    PILLAR = "#"
    TREASURE = "T"
    AMULET = "A"
    MONSTER = "M"
    DOOR = "D"
    EXIT = "E"
    PLAYER = "P"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "Tile":
        """Return the tile for a level-file token.

        Raises:
            ValueError: if the token is not part of the tile literal set.
        """
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown tile token: {token!r}") from None


# Tiles the player cannot step onto.
BLOCKING_TILES: FrozenSet[Tile] = frozenset({Tile.PILLAR, Tile.MONSTER})

# Tiles that stop a monster's line of sight.
SIGHT_BLOCKING_TILES: FrozenSet[Tile] = frozenset({Tile.PILLAR})


def is_blocking_tile(tile: Tile) -> bool:
    """Return True if the player may never move onto the tile."""
    return tile in BLOCKING_TILES


def blocks_sight(tile: Tile) -> bool:
    return tile in SIGHT_BLOCKING_TILES


__all__ = [
    "Tile",
    "BLOCKING_TILES",
    "SIGHT_BLOCKING_TILES",
    "is_blocking_tile",
    "blocks_sight",
]

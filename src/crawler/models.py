from __future__ import annotations

from dataclasses import dataclass

from crawler.map.grid import DungeonGrid


@dataclass
class Player:
    """Mutable player state for one level.

    ``row``/``col`` always point at the grid's player marker. The treasure
    count never decreases within a level; a freshly loaded level starts at 0.
    """

    row: int
    col: int
    treasure_count: int = 0

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)

    def move_to(self, row: int, col: int) -> None:
        self.row = row
        self.col = col


@dataclass
class Level:
    """A loaded dungeon level: the grid and the player that walks it."""

    grid: DungeonGrid
    player: Player

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols


__all__ = ["Player", "Level"]

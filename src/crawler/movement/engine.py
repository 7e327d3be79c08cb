from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from crawler.map.grid import DungeonGrid
from crawler.map.tiles import Tile, is_blocking_tile
from crawler.models import Player
from crawler.movement.directions import Direction, next_position

logger = logging.getLogger(__name__)

# Treasure the player must carry before the exit lets them out.
EXIT_TREASURE_REQUIRED = 1


class MoveOutcome(Enum):
    """Result of a single movement attempt. Exactly one per attempt."""

    STAYED = "stayed"
    MOVED = "moved"
    COLLECTED_TREASURE = "collected_treasure"
    COLLECTED_AMULET = "collected_amulet"
    EXITED_THROUGH_DOOR = "exited_through_door"
    ESCAPED_DUNGEON = "escaped_dungeon"

    @property
    def ends_level(self) -> bool:
        return self in (MoveOutcome.EXITED_THROUGH_DOOR, MoveOutcome.ESCAPED_DUNGEON)


_OUTCOME_BY_TILE = {
    Tile.TREASURE: MoveOutcome.COLLECTED_TREASURE,
    Tile.AMULET: MoveOutcome.COLLECTED_AMULET,
    Tile.DOOR: MoveOutcome.EXITED_THROUGH_DOOR,
    Tile.EXIT: MoveOutcome.ESCAPED_DUNGEON,
}


def _relocate(grid: DungeonGrid, player: Player, row: int, col: int) -> None:
    grid.set(player.row, player.col, Tile.OPEN)
    grid.set(row, col, Tile.PLAYER)
    logger.debug("Player moves from (%d,%d) to (%d,%d)", player.row, player.col, row, col)
    player.move_to(row, col)


def resolve_move(grid: DungeonGrid, player: Player, direction: Optional[Direction]) -> MoveOutcome:
    """Validate and apply one player step in ``direction``.

    Checks run in order against the candidate cell: out of bounds, pillar or
    monster, treasure, amulet, door, exit, anything else. Blocked attempts
    return STAYED and leave the grid and player untouched. A successful step
    touches exactly two cells: the origin becomes OPEN and the destination
    becomes the player marker.

    A ``None`` direction (an unbound command) targets the player's own cell.
    That cell holds the player marker, which falls through to the plain step:
    the outcome is MOVED and the grid is unchanged.
    """
    row, col = next_position(player.row, player.col, direction)

    if not grid.is_within(row, col):
        logger.debug("Blocked movement: target (%d,%d) out of bounds", row, col)
        return MoveOutcome.STAYED

    target = grid.get(row, col)
    if is_blocking_tile(target):
        logger.debug("Blocked movement: target (%d,%d) holds %s", row, col, target.name)
        return MoveOutcome.STAYED

    if target is Tile.EXIT and player.treasure_count < EXIT_TREASURE_REQUIRED:
        logger.debug("Exit at (%d,%d) refused: %d treasure carried", row, col, player.treasure_count)
        return MoveOutcome.STAYED

    if target is Tile.TREASURE:
        player.treasure_count += 1

    _relocate(grid, player, row, col)
    return _OUTCOME_BY_TILE.get(target, MoveOutcome.MOVED)


__all__ = ["EXIT_TREASURE_REQUIRED", "MoveOutcome", "resolve_move"]

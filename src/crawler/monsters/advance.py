from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from crawler.map.grid import Coord, DungeonGrid
from crawler.map.tiles import Tile, blocks_sight
from crawler.models import Player
from crawler.movement.directions import Direction

logger = logging.getLogger(__name__)

# Scan order for the four rays leaving the player's cell.
SCAN_ORDER: Tuple[Direction, ...] = (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


def _ray(grid: DungeonGrid, origin: Coord, direction: Direction) -> Iterator[Coord]:
    """Yield cells moving away from ``origin`` until the grid edge."""
    row, col = origin
    while True:
        row += direction.d_row
        col += direction.d_col
        if not grid.is_within(row, col):
            return
        yield row, col


def _nearest_visible_monster(grid: DungeonGrid, origin: Coord, direction: Direction) -> Optional[Coord]:
    for row, col in _ray(grid, origin, direction):
        tile = grid.get(row, col)
        if blocks_sight(tile):
            return None
        if tile is Tile.MONSTER:
            return row, col
    return None


def _step_toward(grid: DungeonGrid, monster: Coord, direction: Direction) -> None:
    """Move the monster at ``monster`` one cell back along ``direction``.

    The monster swaps places with the tile it steps onto, except that a player
    marker is never copied: the vacated cell becomes OPEN instead.
    """
    row, col = monster
    dest_row, dest_col = row - direction.d_row, col - direction.d_col
    displaced = grid.get(dest_row, dest_col)
    if displaced is Tile.PLAYER:
        displaced = Tile.OPEN
    grid.set(dest_row, dest_col, Tile.MONSTER)
    grid.set(row, col, displaced)
    logger.debug("Monster advances from (%d,%d) to (%d,%d)", row, col, dest_row, dest_col)


def advance_monsters(grid: DungeonGrid, player: Player) -> bool:
    """Advance monsters that can see the player and report a capture.

    Each of the four axis rays from the player is scanned outward. A pillar
    ends the ray. The nearest monster seen before any pillar takes one step
    toward the player; monsters further along the same ray do not move this
    call.

    Returns:
        True if a monster now occupies the player's cell.
    """
    origin = player.position
    for direction in SCAN_ORDER:
        monster = _nearest_visible_monster(grid, origin, direction)
        if monster is not None:
            _step_toward(grid, monster, direction)

    captured = grid.get(player.row, player.col) is Tile.MONSTER
    if captured:
        logger.info("Player captured at (%d,%d)", player.row, player.col)
    return captured


__all__ = ["SCAN_ORDER", "advance_monsters"]

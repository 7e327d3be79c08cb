from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

from crawler.config.loader import Controls
from crawler.errors import SessionOverError
from crawler.events.bus import (
    EVT_AMULET_COLLECTED,
    EVT_DOOR_ENTERED,
    EVT_DUNGEON_ESCAPED,
    EVT_GRID_RESIZED,
    EVT_LEVEL_LOADED,
    EVT_MOVE_BLOCKED,
    EVT_PLAYER_CAPTURED,
    EVT_PLAYER_MOVED,
    EVT_PLAYER_QUIT,
    EVT_TREASURE_COLLECTED,
    EVT_TURN_ENDED,
    EventBus,
)
from crawler.map.grid import DungeonGrid, resize_grid
from crawler.map.loader import load_level
from crawler.models import Level, Player
from crawler.monsters.advance import advance_monsters
from crawler.movement.directions import Direction, decode_command
from crawler.movement.engine import MoveOutcome, resolve_move

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    PLAYING = "playing"
    ESCAPED = "escaped"
    CAPTURED = "captured"
    LEFT_LEVEL = "left_level"
    QUIT = "quit"

    @property
    def is_over(self) -> bool:
        return self is not SessionStatus.PLAYING


@dataclass(frozen=True)
class TurnResult:
    outcome: MoveOutcome
    captured: bool
    status: SessionStatus


_OUTCOME_EVENTS = {
    MoveOutcome.COLLECTED_TREASURE: EVT_TREASURE_COLLECTED,
    MoveOutcome.COLLECTED_AMULET: EVT_AMULET_COLLECTED,
    MoveOutcome.EXITED_THROUGH_DOOR: EVT_DOOR_ENTERED,
    MoveOutcome.ESCAPED_DUNGEON: EVT_DUNGEON_ESCAPED,
}


class Session:
    """One player's run through a single level.

    Owns the only live grid and player for the level. Each turn is one
    ``resolve_move`` followed, while play continues, by ``advance_monsters``;
    ``take_turn`` runs that sequence for a raw input command.
    """

    def __init__(self, level: Level, bus: Optional[EventBus] = None) -> None:
        self._level = level
        self.bus = bus or EventBus()
        self.status = SessionStatus.PLAYING
        self.bus.publish(
            EVT_LEVEL_LOADED, rows=level.rows, cols=level.cols, position=level.player.position, grid=level.grid
        )

    @classmethod
    def load(cls, path: Union[str, Path], bus: Optional[EventBus] = None) -> "Session":
        """Start a session from a level file. Raises LoadError on failure."""
        return cls(load_level(path), bus=bus)

    @property
    def grid(self) -> DungeonGrid:
        return self._level.grid

    @property
    def player(self) -> Player:
        return self._level.player

    def _ensure_playing(self) -> None:
        if self.status.is_over:
            raise SessionOverError(f"Session already ended: {self.status.value}")

    def resolve_move(self, direction: Optional[Direction]) -> MoveOutcome:
        self._ensure_playing()
        origin = self.player.position
        outcome = resolve_move(self.grid, self.player, direction)
        if outcome is MoveOutcome.STAYED:
            self.bus.publish(EVT_MOVE_BLOCKED, position=origin, direction=direction)
        else:
            self.bus.publish(EVT_PLAYER_MOVED, origin=origin, position=self.player.position, outcome=outcome)
        event = _OUTCOME_EVENTS.get(outcome)
        if event is not None:
            self.bus.publish(event, position=self.player.position, treasure_count=self.player.treasure_count)

        if outcome is MoveOutcome.ESCAPED_DUNGEON:
            self.status = SessionStatus.ESCAPED
        elif outcome is MoveOutcome.EXITED_THROUGH_DOOR:
            self.status = SessionStatus.LEFT_LEVEL
        return outcome

    def advance_monsters(self) -> bool:
        self._ensure_playing()
        captured = advance_monsters(self.grid, self.player)
        if captured:
            self.status = SessionStatus.CAPTURED
            self.bus.publish(EVT_PLAYER_CAPTURED, position=self.player.position)
        return captured

    def resize(self) -> None:
        """Replace the level grid with its doubled, tiled copy."""
        self._ensure_playing()
        result = resize_grid(self.grid)
        self._level.grid = result.grid
        self.bus.publish(EVT_GRID_RESIZED, rows=result.rows, cols=result.cols, grid=result.grid)

    def quit(self) -> None:
        self._ensure_playing()
        self.status = SessionStatus.QUIT
        logger.info("Session quit by player")
        self.bus.publish(EVT_PLAYER_QUIT, position=self.player.position, treasure_count=self.player.treasure_count)

    def take_turn(self, command: Union[str, Direction, None], keymap: Optional[Mapping[str, Direction]] = None) -> TurnResult:
        """Run one full turn: move, then let monsters react if play continues.

        ``command`` is either a Direction or a raw input string decoded through
        ``keymap``; unbound commands move the player onto its own cell.
        """
        if isinstance(command, str):
            direction = decode_command(command, keymap if keymap is not None else Controls().keymap)
        else:
            direction = command
        outcome = self.resolve_move(direction)
        captured = False
        if not outcome.ends_level:
            captured = self.advance_monsters()
        result = TurnResult(outcome=outcome, captured=captured, status=self.status)
        self.bus.publish(EVT_TURN_ENDED, result=result, grid=self.grid, treasure_count=self.player.treasure_count)
        return result


__all__ = ["Session", "SessionStatus", "TurnResult"]

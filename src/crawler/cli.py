from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Iterable, Iterator, List, Optional, Sequence, TextIO

from crawler.config.loader import Controls, load_controls
from crawler.errors import GridError, LoadError
from crawler.events.bus import (
    EVT_AMULET_COLLECTED,
    EVT_DOOR_ENTERED,
    EVT_DUNGEON_ESCAPED,
    EVT_GRID_RESIZED,
    EVT_LEVEL_LOADED,
    EVT_MOVE_BLOCKED,
    EVT_PLAYER_CAPTURED,
    EVT_PLAYER_QUIT,
    EVT_TREASURE_COLLECTED,
    EVT_TURN_ENDED,
    EventBus,
)
from crawler.logging_config import configure_logging
from crawler.map.grid import DungeonGrid
from crawler.session import Session, SessionStatus, TurnResult
from crawler.settings import Settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOST = 1
EXIT_LOAD_ERROR = 2
EXIT_GRID_ERROR = 3


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="crawler", description="Play dungeon levels from the terminal.")
    parser.add_argument("levels", nargs="+", help="Level files, played in order as doors are entered")
    parser.add_argument("--moves", help="Commands to play instead of reading stdin (e.g. 'ssdr')")
    parser.add_argument("--controls", help="YAML file with key bindings")
    parser.add_argument("--settings", help="TOML settings file")
    parser.add_argument("--no-grid", action="store_true", help="Do not print the grid after each turn")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def iter_commands(moves: Optional[str], stream: TextIO) -> Iterator[str]:
    """Yield single-character commands, skipping whitespace."""
    source: Iterable[str] = [moves] if moves is not None else stream
    for chunk in source:
        for ch in chunk:
            if not ch.isspace():
                yield ch


class TerminalReporter:
    """Prints session events as status lines and grid snapshots."""

    def __init__(self, out: TextIO, show_grid: bool = True) -> None:
        self.out = out
        self.show_grid = show_grid
        self.treasure_count = 0

    def attach(self, bus: EventBus) -> None:
        bus.subscribe_all({
            EVT_LEVEL_LOADED: self.on_level_loaded,
            EVT_MOVE_BLOCKED: self.on_move_blocked,
            EVT_TREASURE_COLLECTED: self.on_treasure_collected,
            EVT_AMULET_COLLECTED: self.on_amulet_collected,
            EVT_DOOR_ENTERED: self.on_door_entered,
            EVT_DUNGEON_ESCAPED: self.on_dungeon_escaped,
            EVT_PLAYER_CAPTURED: self.on_player_captured,
            EVT_PLAYER_QUIT: self.on_player_quit,
            EVT_GRID_RESIZED: self.on_grid_resized,
            EVT_TURN_ENDED: self.on_turn_ended,
        })

    def say(self, message: str) -> None:
        print(message, file=self.out)

    def render(self, grid: DungeonGrid) -> None:
        if not self.show_grid:
            return
        for line in grid.to_lines(separator=" "):
            self.say(line)
        self.say(f"Treasure: {self.treasure_count}")

    def on_level_loaded(self, grid: DungeonGrid, **_: Any) -> None:
        self.treasure_count = 0
        self.render(grid)

    def on_move_blocked(self, **_: Any) -> None:
        self.say("You can't go that way.")

    def on_treasure_collected(self, treasure_count: int, **_: Any) -> None:
        self.treasure_count = treasure_count
        self.say(f"You found treasure! ({treasure_count} total)")

    def on_amulet_collected(self, **_: Any) -> None:
        self.say("You picked up an amulet.")

    def on_door_entered(self, **_: Any) -> None:
        self.say("You go through the door.")

    def on_dungeon_escaped(self, treasure_count: int, **_: Any) -> None:
        self.say(f"You escaped the dungeon with {treasure_count} treasure!")

    def on_player_captured(self, **_: Any) -> None:
        self.say("A monster caught you!")

    def on_player_quit(self, **_: Any) -> None:
        self.say("You give up and leave the dungeon.")

    def on_grid_resized(self, rows: int, cols: int, grid: DungeonGrid) -> None:
        self.say(f"The dungeon grows to {rows}x{cols}.")
        self.render(grid)

    def on_turn_ended(self, result: TurnResult, grid: DungeonGrid, **_: Any) -> None:
        if not result.status.is_over:
            self.render(grid)


def play(
    levels: List[str],
    commands: Iterable[str],
    controls: Controls,
    out: TextIO,
    show_grid: bool = True,
) -> SessionStatus:
    """Play the given levels in order until the run ends or commands run out.

    Entering a door starts the next level; with no next level the run ends as
    LEFT_LEVEL. Returns the status of the last session played, PLAYING if the
    commands were exhausted first. All output comes from a TerminalReporter
    listening on the sessions' shared bus.
    """
    bus = EventBus()
    TerminalReporter(out, show_grid).attach(bus)
    keymap = controls.keymap
    remaining = list(levels)
    session = Session.load(remaining.pop(0), bus=bus)

    for command in commands:
        if command == controls.quit:
            session.quit()
        elif command == controls.resize:
            session.resize()
        else:
            session.take_turn(command, keymap)

        if session.status is SessionStatus.LEFT_LEVEL and remaining:
            session = Session.load(remaining.pop(0), bus=bus)
        elif session.status.is_over:
            return session.status

    logger.info("Commands exhausted while still playing")
    return session.status


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = Settings.from_sources(file_path=args.settings)
    configure_logging(level_name="DEBUG" if args.debug else settings.log_level)

    try:
        controls = load_controls(args.controls or settings.controls_file)
    except (OSError, ValueError) as exc:
        logger.error("Invalid controls: %s", exc)
        return EXIT_LOAD_ERROR

    show_grid = settings.show_grid and not args.no_grid
    try:
        status = play(args.levels, iter_commands(args.moves, sys.stdin), controls, sys.stdout, show_grid)
    except LoadError as exc:
        logger.error("%s", exc)
        return EXIT_LOAD_ERROR
    except GridError as exc:
        logger.error("Grid error: %s", exc)
        return EXIT_GRID_ERROR

    if status in (SessionStatus.ESCAPED, SessionStatus.LEFT_LEVEL, SessionStatus.QUIT):
        return EXIT_OK
    return EXIT_LOST


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))

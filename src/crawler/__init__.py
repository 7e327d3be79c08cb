"""Turn-based dungeon crawl engine: level loading, movement and monsters."""

from crawler.errors import CrawlerError, LoadError
from crawler.map.grid import DungeonGrid, create_grid, destroy_grid, resize_grid
from crawler.map.loader import load_level, parse_level
from crawler.map.tiles import Tile
from crawler.models import Level, Player
from crawler.monsters.advance import advance_monsters
from crawler.movement.directions import Direction
from crawler.movement.engine import MoveOutcome, resolve_move
from crawler.session import Session, SessionStatus, TurnResult

__version__ = "0.1.0"

__all__ = [
    "CrawlerError",
    "LoadError",
    "DungeonGrid",
    "create_grid",
    "destroy_grid",
    "resize_grid",
    "load_level",
    "parse_level",
    "Tile",
    "Level",
    "Player",
    "advance_monsters",
    "Direction",
    "MoveOutcome",
    "resolve_move",
    "Session",
    "SessionStatus",
    "TurnResult",
]

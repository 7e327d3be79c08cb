from crawler.movement.directions import Direction, next_position
from crawler.movement.engine import MoveOutcome, resolve_move

__all__ = ["Direction", "next_position", "MoveOutcome", "resolve_move"]

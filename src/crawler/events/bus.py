from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Mapping

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

EVT_LEVEL_LOADED = "level_loaded"
EVT_PLAYER_MOVED = "player_moved"
EVT_MOVE_BLOCKED = "move_blocked"
EVT_TREASURE_COLLECTED = "treasure_collected"
EVT_AMULET_COLLECTED = "amulet_collected"
EVT_DOOR_ENTERED = "door_entered"
EVT_DUNGEON_ESCAPED = "dungeon_escaped"
EVT_PLAYER_CAPTURED = "player_captured"
EVT_PLAYER_QUIT = "player_quit"
EVT_GRID_RESIZED = "grid_resized"
EVT_TURN_ENDED = "turn_ended"


class EventBus:
    """Synchronous channel between a session and whatever presents it.

    The session publishes what happened during a turn (treasure picked up,
    grid resized, player captured); the terminal runner subscribes to turn
    those facts into messages and grid snapshots. Payloads are keyword
    arguments, and handlers run in subscription order before ``publish``
    returns. A failing handler propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` for ``event`` and return a callable that removes it."""
        if handler not in self._handlers[event]:
            self._handlers[event].append(handler)
        return lambda: self.unsubscribe(event, handler)

    def subscribe_all(self, handlers: Mapping[str, Handler]) -> None:
        for event, handler in handlers.items():
            self.subscribe(event, handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def has_subscribers(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def publish(self, event: str, **payload: Any) -> int:
        """Deliver ``payload`` to every handler of ``event``.

        Returns:
            The number of handlers that were called.
        """
        handlers = tuple(self._handlers.get(event, ()))
        logger.debug("Publishing '%s' to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(**payload)
        return len(handlers)


__all__ = [
    "EventBus",
    "Handler",
    "EVT_LEVEL_LOADED",
    "EVT_PLAYER_MOVED",
    "EVT_MOVE_BLOCKED",
    "EVT_TREASURE_COLLECTED",
    "EVT_AMULET_COLLECTED",
    "EVT_DOOR_ENTERED",
    "EVT_DUNGEON_ESCAPED",
    "EVT_PLAYER_CAPTURED",
    "EVT_PLAYER_QUIT",
    "EVT_GRID_RESIZED",
    "EVT_TURN_ENDED",
]

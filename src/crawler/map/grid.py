from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Generator, List, Optional, Sequence, Tuple

from crawler.errors import GridAllocationError, GridReleasedError, PlayerMarkerError
from crawler.map.tiles import Tile

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Size:
    rows: int
    cols: int


class DungeonGrid:
    """A bounds-checked, row-major 2D tile grid for one dungeon level.

    All access goes through ``get``/``safe_get``/``set`` so that movement and
    monster logic never index the internal storage directly. A grid is owned by
    exactly one level; once released (explicitly or by a resize) every access
    raises :class:`GridReleasedError`.
    """

    __slots__ = ("_rows", "_cols", "_tiles")

    def __init__(self, rows: int, cols: int, default_tile: Tile = Tile.OPEN) -> None:
        if rows <= 0 or cols <= 0:
            raise GridAllocationError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self._rows = int(rows)
        self._cols = int(cols)
        # tiles[row][col]
        try:
            self._tiles: Optional[List[List[Tile]]] = [
                [default_tile for _ in range(self._cols)] for _ in range(self._rows)
            ]
        except MemoryError:
            raise GridAllocationError(f"Cannot allocate a {rows}x{cols} grid") from None
        logger.debug("Initialized DungeonGrid %dx%d with default tile %s", self._rows, self._cols, default_tile.name)

    @property
    def size(self) -> Size:
        return Size(self._rows, self._cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def released(self) -> bool:
        return self._tiles is None

    def _storage(self) -> List[List[Tile]]:
        if self._tiles is None:
            raise GridReleasedError("Grid has been released")
        return self._tiles

    def is_within(self, row: int, col: int) -> bool:
        """Check if coordinates are within the grid bounds. Never raises."""
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get(self, row: int, col: int) -> Tile:
        """Return the tile at (row, col).

        Raises IndexError if out of bounds; callers should guard with is_within
        or use safe_get.
        """
        if not self.is_within(row, col):
            raise IndexError(f"Coordinates out of bounds: ({row}, {col}) for grid {self._rows}x{self._cols}")
        return self._storage()[row][col]

    def safe_get(self, row: int, col: int) -> Optional[Tile]:
        """Return the tile at (row, col) or None when out of bounds."""
        if not self.is_within(row, col):
            return None
        return self._storage()[row][col]

    def set(self, row: int, col: int, tile: Tile) -> None:
        if not isinstance(tile, Tile):
            raise TypeError("tile must be a Tile enum member")
        if not self.is_within(row, col):
            raise IndexError(f"Coordinates out of bounds: ({row}, {col}) for grid {self._rows}x{self._cols}")
        self._storage()[row][col] = tile

    def cells(self) -> Generator[Tuple[int, int, Tile], None, None]:
        """Yield ``(row, col, tile)`` for every cell in row-major order."""
        for r, line in enumerate(self._storage()):
            for c, tile in enumerate(line):
                yield r, c, tile

    def find(self, tile: Tile) -> List[Coord]:
        return [(r, c) for r, c, t in self.cells() if t is tile]

    def count(self, tile: Tile) -> int:
        return sum(1 for _, _, t in self.cells() if t is tile)

    def player_position(self) -> Coord:
        """Return the coordinates of the single player marker.

        Raises:
            PlayerMarkerError: if zero or several cells hold the marker.
        """
        found = self.find(Tile.PLAYER)
        if len(found) != 1:
            raise PlayerMarkerError(f"Expected exactly one player marker, found {len(found)}")
        return found[0]

    def release(self) -> None:
        """Drop the tile storage. Releasing an already released grid is a no-op."""
        if self._tiles is None:
            return
        self._tiles = None
        logger.debug("Released DungeonGrid %dx%d", self._rows, self._cols)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "DungeonGrid":
        """Create a grid from rows of tile tokens (whitespace is ignored).

        ``["M-P"]`` and ``["M - P"]`` describe the same 1x3 grid.
        """
        rows = ["".join(line.split()) for line in lines]
        if not rows or not rows[0]:
            raise GridAllocationError("lines must describe at least one cell")
        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"All rows must have equal width; row 0 has {width}, row {i} has {len(row)}")

        grid = cls(len(rows), width)
        for r, row in enumerate(rows):
            for c, ch in enumerate(row):
                grid.set(r, c, Tile.from_token(ch))
        return grid

    def to_lines(self, separator: str = "") -> List[str]:
        """Render the grid as rows of tile tokens."""
        return [separator.join(tile.token for tile in line) for line in self._storage()]

    def __repr__(self) -> str:
        state = " released" if self.released else ""
        return f"DungeonGrid(rows={self._rows}, cols={self._cols}{state})"


@dataclass(frozen=True)
class ResizeResult:
    grid: DungeonGrid
    rows: int
    cols: int


def create_grid(rows: int, cols: int) -> DungeonGrid:
    """Allocate a ``rows x cols`` grid with every cell OPEN."""
    return DungeonGrid(rows, cols, default_tile=Tile.OPEN)


def destroy_grid(grid: DungeonGrid) -> None:
    grid.release()


def resize_grid(grid: DungeonGrid) -> ResizeResult:
    """Double both dimensions of ``grid`` by tiling it 2x2.

    Cell ``(i, j)`` of the new grid copies ``(i % rows, j % cols)`` of the old
    one, except that the player marker is tiled as OPEN and then restored once
    at its original coordinates. The source grid is released.

    Raises:
        PlayerMarkerError: if the source grid does not hold exactly one marker.
        GridReleasedError: if the source grid was already released.
    """
    player_row, player_col = grid.player_position()
    rows, cols = grid.rows, grid.cols

    source: Dict[Coord, Tile] = {(r, c): t for r, c, t in grid.cells()}
    source[(player_row, player_col)] = Tile.OPEN

    resized = DungeonGrid(rows * 2, cols * 2)
    for r in range(resized.rows):
        for c in range(resized.cols):
            resized.set(r, c, source[(r % rows, c % cols)])
    resized.set(player_row, player_col, Tile.PLAYER)

    grid.release()
    logger.info("Resized grid %dx%d -> %dx%d", rows, cols, resized.rows, resized.cols)
    return ResizeResult(resized, resized.rows, resized.cols)


__all__ = [
    "Coord",
    "Size",
    "DungeonGrid",
    "ResizeResult",
    "create_grid",
    "destroy_grid",
    "resize_grid",
]

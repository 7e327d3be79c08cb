from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple, Union

from crawler.errors import GridAllocationError, LoadError
from crawler.map.grid import create_grid
from crawler.map.tiles import Tile
from crawler.models import Level, Player

logger = logging.getLogger(__name__)

HEADER_FIELDS = ("rows", "cols", "player_row", "player_col")


def _parse_header(words: List[str], source: str) -> Tuple[int, int, int, int]:
    if len(words) < len(HEADER_FIELDS):
        raise LoadError(f"{source}: level header needs {len(HEADER_FIELDS)} integers, found {len(words)}")
    values = []
    for name, word in zip(HEADER_FIELDS, words):
        try:
            values.append(int(word))
        except ValueError:
            raise LoadError(f"{source}: {name} must be an integer, got {word!r}") from None
    rows, cols, player_row, player_col = values
    return rows, cols, player_row, player_col


def parse_level(text: str, source: str = "<string>") -> Level:
    """Build a level from the text of a level file.

    Format: ``rows cols playerRow playerCol`` followed by ``rows * cols`` tile
    tokens in row-major order. Every non-whitespace character after the header
    is one token, so rows may be written as ``- - -`` or ``---``. The cell at
    the player coordinates always becomes the player marker, whatever token was
    read there.

    Raises:
        LoadError: if the header is malformed, the grid cannot be allocated,
            the player lies outside the grid, tokens are missing or a token is
            not a known tile.
    """
    words = text.split(None, len(HEADER_FIELDS))
    rows, cols, player_row, player_col = _parse_header(words, source)

    body = words[len(HEADER_FIELDS)] if len(words) > len(HEADER_FIELDS) else ""
    tokens = "".join(body.split())
    expected = rows * cols
    if len(tokens) < expected:
        raise LoadError(f"{source}: expected {expected} tile tokens, found {len(tokens)}")

    try:
        grid = create_grid(rows, cols)
    except GridAllocationError as exc:
        logger.error("Grid allocation failed for %s: %s", source, exc)
        raise LoadError(f"{source}: cannot allocate {rows}x{cols} grid") from exc

    if not grid.is_within(player_row, player_col):
        raise LoadError(f"{source}: player position ({player_row}, {player_col}) is outside the {rows}x{cols} grid")
    if len(tokens) > expected:
        logger.warning("%s: ignoring %d trailing tokens", source, len(tokens) - expected)

    for index in range(expected):
        r, c = divmod(index, cols)
        if (r, c) == (player_row, player_col):
            grid.set(r, c, Tile.PLAYER)
            continue
        try:
            grid.set(r, c, Tile.from_token(tokens[index]))
        except ValueError as exc:
            raise LoadError(f"{source}: row {r}, col {c}: {exc}") from exc

    logger.info("Loaded level %s (%dx%d), player at (%d,%d)", source, rows, cols, player_row, player_col)
    return Level(grid=grid, player=Player(row=player_row, col=player_col))


def load_level(path: Union[str, Path]) -> Level:
    """Read and parse a level file.

    Raises:
        LoadError: if the file cannot be read or its content is invalid.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Unable to open level file %s: %s", path, exc)
        raise LoadError(f"Unable to open level file: {path}") from exc
    return parse_level(text, source=str(path))


__all__ = ["parse_level", "load_level"]

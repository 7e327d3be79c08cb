import logging
import textwrap

import pytest

from crawler.errors import LoadError
from crawler.map.loader import load_level, parse_level
from crawler.map.tiles import Tile


def test_parse_level_reads_grid_and_player():
    level = parse_level("3 3 1 1 \n - - - \n - P - \n - - T")
    assert (level.rows, level.cols) == (3, 3)
    assert level.player.position == (1, 1)
    assert level.player.treasure_count == 0
    assert level.grid.to_lines() == ["---", "-P-", "--T"]


def test_player_cell_forced_to_marker_whatever_token():
    level = parse_level("1 3 0 2\n M - #")
    assert level.grid.to_lines() == ["M-P"]


def test_unvalidated_token_at_player_cell_is_accepted():
    level = parse_level("1 2 0 0\n ? -")
    assert level.grid.get(0, 0) is Tile.PLAYER


def test_compact_rows_load_like_spaced_rows():
    spaced = parse_level("2 2 0 0\n- T\nM E")
    compact = parse_level("2 2 0 0\n-T\nME")
    assert spaced.grid.to_lines() == compact.grid.to_lines() == ["PT", "ME"]


def test_load_level_from_file(tmp_path):
    path = tmp_path / "level1.txt"
    path.write_text(textwrap.dedent("""\
        2 4
        0 3
        # - A P
        D - E T
        """), encoding="utf-8")
    level = load_level(path)
    assert level.grid.to_lines() == ["#-AP", "D-ET"]
    assert level.player.position == (0, 3)


def test_missing_file_raises_load_error(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    with pytest.raises(LoadError):
        load_level(tmp_path / "nope.txt")
    assert "Unable to open level file" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        "",
        "3 3 1",
        "3 x 1 1 - - -",
        "0 3 0 0",
        "2 -1 0 0",
        "2 2 2 0 - - - -",
        "2 2 0 -1 - - - -",
        "2 2 0 0 - - -",
        "2 2 0 0 - - - z",
    ],
    ids=[
        "empty",
        "short-header",
        "non-integer",
        "zero-rows",
        "negative-cols",
        "player-row-outside",
        "player-col-outside",
        "too-few-tokens",
        "unknown-token",
    ],
)
def test_invalid_levels_raise_load_error(text):
    with pytest.raises(LoadError):
        parse_level(text)


def test_trailing_tokens_are_ignored_with_warning(caplog):
    caplog.set_level(logging.WARNING)
    level = parse_level("1 2 0 0 - T # #", source="extra.txt")
    assert level.grid.to_lines() == ["PT"]
    assert "ignoring 2 trailing tokens" in caplog.text


def test_oversized_header_with_few_tokens_fails_before_allocating(monkeypatch):
    import crawler.map.loader as loader

    def fail_allocation(rows, cols):
        raise AssertionError(f"grid of {rows}x{cols} should not be allocated")

    monkeypatch.setattr(loader, "create_grid", fail_allocation)
    with pytest.raises(LoadError, match="expected 2500000000 tile tokens, found 1"):
        parse_level("50000 50000 0 0 P")

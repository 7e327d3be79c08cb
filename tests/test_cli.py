from __future__ import annotations

import io

import pytest

from crawler.cli import (
    EXIT_GRID_ERROR,
    EXIT_LOAD_ERROR,
    EXIT_LOST,
    EXIT_OK,
    TerminalReporter,
    iter_commands,
    main,
    play,
)
from crawler.config.loader import Controls
from crawler.errors import PlayerMarkerError
from crawler.events.bus import EventBus
from crawler.map.loader import parse_level
from crawler.movement.directions import Direction
from crawler.session import Session, SessionStatus


@pytest.fixture()
def level_file(tmp_path):
    def write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    for key in ("CRAWLER_SETTINGS_FILE", "CRAWLER_LOG_LEVEL", "CRAWLER_CONTROLS_FILE", "CRAWLER_SHOW_GRID"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_iter_commands_skips_whitespace():
    assert list(iter_commands("s d\n", io.StringIO())) == ["s", "d"]
    assert list(iter_commands(None, io.StringIO("w\na\n"))) == ["w", "a"]


def test_play_escape_run(level_file):
    path = level_file("level1.txt", "1 3 0 0\n P T E")
    out = io.StringIO()
    status = play([path], iter("dd"), Controls(), out)
    assert status is SessionStatus.ESCAPED
    text = out.getvalue()
    assert "You found treasure! (1 total)" in text
    assert "You escaped the dungeon with 1 treasure!" in text
    assert "P T E" in text


def test_play_door_loads_next_level(level_file):
    first = level_file("level1.txt", "1 2 0 0\n P D")
    second = level_file("level2.txt", "1 2 0 0\n P -")
    out = io.StringIO()
    status = play([first, second], iter("dq"), Controls(), out, show_grid=False)
    assert status is SessionStatus.QUIT
    assert "You go through the door." in out.getvalue()


def test_play_resize_command(level_file):
    path = level_file("level1.txt", "1 2 0 0\n P #")
    out = io.StringIO()
    status = play([path], iter("r"), Controls(), out)
    assert status is SessionStatus.PLAYING
    assert "The dungeon grows to 2x4." in out.getvalue()
    assert "P # - #" in out.getvalue()


def test_main_exit_codes(level_file, capsys):
    escape = level_file("escape.txt", "1 3 0 0\n P T E")
    caught = level_file("caught.txt", "1 2 0 1\n M P")
    assert main([escape, "--moves", "dd"]) == EXIT_OK
    assert main([caught, "--moves", "s", "--no-grid"]) == EXIT_LOST
    assert "A monster caught you!" in capsys.readouterr().out


def test_main_load_error(tmp_path):
    assert main([str(tmp_path / "missing.txt"), "--moves", "d"]) == EXIT_LOAD_ERROR


def test_main_custom_controls(level_file, tmp_path):
    path = level_file("level1.txt", "1 3 0 0\n P T E")
    controls = tmp_path / "keys.yaml"
    controls.write_text("right: l\n", encoding="utf-8")
    assert main([path, "--moves", "ll", "--controls", str(controls)]) == EXIT_OK


def test_reporter_renders_from_session_events():
    bus = EventBus()
    out = io.StringIO()
    TerminalReporter(out).attach(bus)
    session = Session(parse_level("1 3 0 0\n P T #"), bus=bus)
    session.take_turn(Direction.RIGHT)
    session.take_turn(Direction.RIGHT)
    assert out.getvalue().splitlines() == [
        "P T #",
        "Treasure: 0",
        "You found treasure! (1 total)",
        "- P #",
        "Treasure: 1",
        "You can't go that way.",
        "- P #",
        "Treasure: 1",
    ]


def test_reporter_without_grid_prints_only_messages():
    bus = EventBus()
    out = io.StringIO()
    TerminalReporter(out, show_grid=False).attach(bus)
    session = Session(parse_level("1 2 0 1\n M P"), bus=bus)
    session.take_turn(Direction.RIGHT)
    assert out.getvalue().splitlines() == ["You can't go that way.", "A monster caught you!"]


def test_main_reports_grid_errors_without_traceback(level_file, monkeypatch, caplog):
    path = level_file("level1.txt", "1 2 0 0\n P -")

    def broken_resize(self):
        raise PlayerMarkerError("Expected exactly one player marker, found 0")

    monkeypatch.setattr(Session, "resize", broken_resize)
    assert main([path, "--moves", "r", "--no-grid"]) == EXIT_GRID_ERROR
    assert "Expected exactly one player marker" in caplog.text

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from crawler.movement.directions import Direction

logger = logging.getLogger(__name__)

_DEFAULTS = {"up": "w", "down": "s", "left": "a", "right": "d", "quit": "q", "resize": "r"}


@dataclass(frozen=True)
class Controls:
    """Key bindings for the command-line runner."""

    up: str = "w"
    down: str = "s"
    left: str = "a"
    right: str = "d"
    quit: str = "q"
    resize: str = "r"

    @property
    def keymap(self) -> Dict[str, Direction]:
        return {
            self.up: Direction.UP,
            self.down: Direction.DOWN,
            self.left: Direction.LEFT,
            self.right: Direction.RIGHT,
        }


def _validate(raw: Dict[str, object]) -> Controls:
    unknown = set(raw) - set(_DEFAULTS)
    if unknown:
        raise ValueError(f"Unknown control names: {sorted(unknown)}")
    merged = {**_DEFAULTS, **{k: str(v) for k, v in raw.items()}}
    for name, key in merged.items():
        if len(key) != 1 or key.isspace():
            raise ValueError(f"Control {name!r} must be a single visible character, got {key!r}")
    if len(set(merged.values())) != len(merged):
        raise ValueError(f"Controls must use distinct keys: {merged}")
    return Controls(**merged)


def load_controls(path: Optional[Union[str, Path]] = None) -> Controls:
    """Load key bindings from YAML.

    If path is None, loads the embedded default resource at
    crawler/config/controls.yaml. Missing entries fall back to the defaults.

    Raises:
        ValueError: if a binding is unknown, not one character, or duplicated.
    """
    if path is None:
        data = resource_files("crawler.config").joinpath("controls.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded controls resource")
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        logger.debug("Loaded controls from path: %s", path)

    raw = yaml.safe_load(data) or {}
    if not isinstance(raw, dict):
        raise ValueError("Controls file must contain a mapping of control name to key")
    controls = _validate(raw)
    logger.info("Controls: %s", controls)
    return controls


__all__ = ["Controls", "load_controls"]

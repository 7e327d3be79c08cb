from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover - older interpreters
    tomllib = None  # type: ignore

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey values into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


@dataclass
class Settings:
    """Runtime settings for the command-line runner.

    Sources, lowest to highest precedence:
    - defaults
    - a TOML file (env CRAWLER_SETTINGS_FILE, or configs/settings.toml if present)
    - environment variables (prefix: CRAWLER_)
    """

    log_level: str = "INFO"
    controls_file: Optional[str] = None
    show_grid: bool = True

    def validate(self) -> None:
        """Normalize settings, falling back to defaults for invalid values."""
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            logger.warning("Invalid log level %r; using INFO", self.log_level)
            level = "INFO"
        self.log_level = level
        if self.controls_file is not None:
            self.controls_file = str(self.controls_file)
        try:
            self.show_grid = _as_bool(self.show_grid)
        except ValueError:
            logger.warning("Invalid show_grid %r; using True", self.show_grid)
            self.show_grid = True

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        mapping = {
            "CRAWLER_LOG_LEVEL": "log_level",
            "CRAWLER_CONTROLS_FILE": "controls_file",
            "CRAWLER_SHOW_GRID": "show_grid",
        }
        return {field: env[key] for key, field in mapping.items() if env.get(key)}

    @classmethod
    def from_toml_file(cls, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.debug("Settings file not found: %s", path)
            return {}
        if tomllib is None:
            logger.warning("tomllib not available; cannot read TOML settings file: %s", path)
            return {}
        try:
            with path.open("rb") as f:
                doc = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.error("Failed to read settings TOML %s: %s", path, exc)
            return {}
        allowed = {f.name for f in dataclasses.fields(cls)}
        # Accept keys at the top level or under a [crawler] table
        flat = {k: v for k, v in doc.items() if not isinstance(v, dict)}
        if isinstance(doc.get("crawler"), dict):
            flat.update(doc["crawler"])
        ignored = set(flat) - allowed
        if ignored:
            logger.warning("Ignoring unknown settings in %s: %s", path, sorted(ignored))
        return {k: v for k, v in flat.items() if k in allowed}

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get("CRAWLER_SETTINGS_FILE")
        if env_path:
            return Path(env_path).expanduser().resolve()
        default_path = Path.cwd() / "configs" / "settings.toml"
        if default_path.exists():
            return default_path
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Union[Path, str]] = None,
    ) -> "Settings":
        data: Dict[str, Any] = {}
        if file_path is not None:
            chosen_path: Optional[Path] = Path(file_path).expanduser().resolve()
        else:
            chosen_path = cls.discover_config_path(env)
        if chosen_path is not None:
            data.update(cls.from_toml_file(chosen_path))
        data.update(cls.from_env(env))
        settings = cls(**data)
        settings.validate()
        return settings


__all__ = ["Settings"]

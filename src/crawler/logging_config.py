import logging
import os
from typing import Optional


def configure_logging(default_level: int = logging.INFO, level_name: Optional[str] = None) -> None:
    """Configure root logger with a sane default format.

    Respects CRAWLER_LOG_LEVEL env var if present; an explicit level_name wins.
    """
    level_name = level_name or os.getenv("CRAWLER_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )

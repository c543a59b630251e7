from __future__ import annotations

import logging

from rich.logging import RichHandler


def _level_from_string(level: str) -> int:
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


def setup_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger("bendinledim")
    logger.setLevel(_level_from_string(level))
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.setLevel(_level_from_string(level))
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger

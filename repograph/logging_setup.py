"""Process-wide logging configuration."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a single stream handler to the ``repograph`` logger.

    Safe to call more than once; later calls only adjust the level.
    """
    logger = logging.getLogger("repograph")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_repograph", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._repograph = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

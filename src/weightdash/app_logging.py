"""Logging configuration helpers."""

from __future__ import annotations

import logging
from typing import Union


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Configure application logging with a single stream handler.

    Repeated calls only update the level.
    """
    logger = logging.getLogger("weightdash")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

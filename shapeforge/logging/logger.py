# shapeforge/logging/logger.py
"""
Unified logging setup for shapeforge.

All modules use:
    from shapeforge.logging.logger import get_logger
    logger = get_logger(__name__)

Log namespaces follow module paths, so a single call to configure_logging()
(made by the CLI entrypoint) controls the whole generator.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO = sys.stderr,
) -> None:
    """
    Configure the root logging handler.

    Safe to call multiple times: a handler is only installed once.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Do NOT configure logging here; configuration happens in configure_logging().
    """
    return logging.getLogger(name)

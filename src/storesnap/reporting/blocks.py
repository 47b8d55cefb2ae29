"""Framed ``[START]``/``[FINISH]`` log blocks around phase steps."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from storesnap.constants.reporting import (
    ANSI_RESET,
    BLOCK_COLOR,
    DEBUG_BLOCK_COLOR,
    FINISH_PREFIX,
    START_PREFIX,
)

logger = logging.getLogger("storesnap")

_use_color = False


def set_color(enabled: bool) -> None:
    """Turn ANSI colouring of block frames on or off (the CLI enables it for terminals)."""
    global _use_color
    _use_color = enabled


def start_message(message: str) -> str:
    return f"{START_PREFIX} {message}"


def finish_message(message: str) -> str:
    return f"{FINISH_PREFIX} {message}"


def framed(message: str, color: str = "") -> str:
    if color and _use_color:
        message = f"{color}{message}{ANSI_RESET}"
    return f"\n\n{message}\n\n"


@contextmanager
def log_block(message: str, *, level: int = logging.INFO, color: str = BLOCK_COLOR) -> Iterator[None]:
    """Log a start frame, run the block, then log a finish frame.

    The finish frame is only written when the block completes, so a step that
    raises leaves its ``[START]`` line as the last word in the log.
    """
    logger.log(level, framed(start_message(message), color))
    yield
    logger.log(level, framed(finish_message(message), color))


def log_block_debug(message: str) -> AbstractContextManager[None]:
    """Frame a diagnostics-only step in the debug colour."""
    return log_block(message, color=DEBUG_BLOCK_COLOR)


def log_lines(text: str, *, level: int = logging.INFO) -> None:
    """Log each non-empty line of *text*."""
    for line in text.splitlines():
        if line.strip():
            logger.log(level, line)

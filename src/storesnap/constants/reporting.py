"""Log frame markers and terminal colours."""

from __future__ import annotations

START_PREFIX: str = "[START]"
FINISH_PREFIX: str = "[FINISH]"

# ANSI escape codes for terminal colouring.
ANSI_RESET: str = "\033[0m"
ANSI_MAGENTA: str = "\033[35;1m"
ANSI_DIM: str = "\033[2m"

BLOCK_COLOR: str = ANSI_MAGENTA
DEBUG_BLOCK_COLOR: str = ANSI_DIM

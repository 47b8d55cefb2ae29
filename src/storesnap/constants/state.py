"""Constants for the file-backed state store."""

from __future__ import annotations

STATE_FILE_VERSION: int = 1
STATE_TEMP_PREFIX: str = ".state-"
STATE_TEMP_SUFFIX: str = ".tmp"

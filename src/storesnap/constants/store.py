"""Constants for store scanning and synchronization."""

from __future__ import annotations

NIX_BIN: str = "nix"

SAVE_SCAN_MAX_DEPTH: int = 100
DIAGNOSTIC_SCAN_MAX_DEPTH: int = 1000

# "/nix/store/<hash>-<name>/..." keeps "nix", "store" and the entry name.
DEFAULT_STORE_ENTRY_DEPTH: int = 3
MIN_STORE_ENTRY_DEPTH: int = 3

BUILD_RECIPE_SUFFIX: str = ".drv"
STORE_ENTRY_SEPARATOR: str = "-"

ACCESS_TIME_COLUMNS: str = "column 1: access time, column 2: store path"

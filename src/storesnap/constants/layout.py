"""Filesystem layout of the cache root and the Nix store."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

LINUX_CACHE_ROOT: Path = Path("/home/runner/work/nix-cache")
MACOS_CACHE_ROOT: Path = Path("/Users/runner/work/nix-cache")
MACOS_PLATFORM: str = "darwin"
LINUX_PLATFORM: str = "linux"

DUMP_DIRNAME: str = "dump"
TIME_MARKER_NAME: str = "time"
WORKING_SET_NAME: str = "working-set"
WORKING_SET_TMP_SUFFIX: str = "-tmp"
LOGS_NAME: str = "logs"

# Relative to a store prefix: "/" for the live store, the snapshot directory for a dump.
STORE_RELATIVE_PATH: PurePosixPath = PurePosixPath("nix/store")
LIVE_STORE_PREFIX: Path = Path("/")

GC_ROOTS_DIR: Path = Path("/nix/var/nix/gcroots")
GC_GUARD_DIRNAME: str = "storesnap-working-set"

WORKING_SET_TEMP_PREFIX: str = ".working-set-"
WORKING_SET_TEMP_SUFFIX: str = ".tmp"

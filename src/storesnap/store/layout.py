"""Paths under the cache root shared by the restore and save phases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from storesnap.constants.layout import (
    DUMP_DIRNAME,
    LINUX_CACHE_ROOT,
    LOGS_NAME,
    MACOS_CACHE_ROOT,
    MACOS_PLATFORM,
    STORE_RELATIVE_PATH,
    TIME_MARKER_NAME,
    WORKING_SET_NAME,
    WORKING_SET_TMP_SUFFIX,
)


def default_cache_root(platform: str) -> Path:
    """Return the runner work directory used as cache root on *platform*."""
    return MACOS_CACHE_ROOT if platform == MACOS_PLATFORM else LINUX_CACHE_ROOT


def store_dir(prefix: Path) -> Path:
    """Return the ``nix/store`` directory below a store prefix."""
    return prefix / STORE_RELATIVE_PATH


@dataclass(frozen=True)
class CacheLayout:
    """Snapshot directory, time marker and scratch files under one cache root."""

    root: Path

    @property
    def dump(self) -> Path:
        return self.root / DUMP_DIRNAME

    @property
    def dump_store(self) -> Path:
        return store_dir(self.dump)

    @property
    def time_marker(self) -> Path:
        return self.root / TIME_MARKER_NAME

    @property
    def working_set(self) -> Path:
        return self.root / WORKING_SET_NAME

    @property
    def working_set_tmp(self) -> Path:
        return self.root / f"{WORKING_SET_NAME}{WORKING_SET_TMP_SUFFIX}"

    @property
    def logs(self) -> Path:
        return self.root / LOGS_NAME

    def ensure(self) -> None:
        """Create the cache root and the snapshot's store directory."""
        self.dump_store.mkdir(parents=True, exist_ok=True)

    def reset_logs(self) -> None:
        """Truncate the captured stderr log before a new batch of commands."""
        self.root.mkdir(parents=True, exist_ok=True)
        self.logs.write_text("", encoding="utf-8")

    def read_logs(self) -> str:
        try:
            return self.logs.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

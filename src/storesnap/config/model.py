"""Resolved settings shared by the restore and save phases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from storesnap.constants.layout import (
    GC_GUARD_DIRNAME,
    GC_ROOTS_DIR,
    LINUX_CACHE_ROOT,
    LINUX_PLATFORM,
    LIVE_STORE_PREFIX,
)
from storesnap.constants.store import DEFAULT_STORE_ENTRY_DEPTH
from storesnap.store.layout import CacheLayout


@dataclass(frozen=True)
class SnapshotSettings:
    """Resolved inputs for one job, with OS-qualified flags already selected."""

    platform: str = LINUX_PLATFORM
    cache_paths: tuple[str, ...] = ()
    enable_cross_os_archive: bool = False
    fail_on_cache_miss: bool = False
    lookup_only: bool = False
    upload_chunk_size: int | None = None
    keep_cache: bool = False
    debug_enabled: bool = False
    cache_working_set: bool = False
    check_signatures: bool = False
    collect_garbage: bool = False
    cache_root: Path = LINUX_CACHE_ROOT
    cache_dir: Path | None = None
    store_entry_depth: int = DEFAULT_STORE_ENTRY_DEPTH
    store_prefix: Path = LIVE_STORE_PREFIX
    gc_roots_dir: Path = GC_ROOTS_DIR

    @property
    def layout(self) -> CacheLayout:
        return CacheLayout(self.cache_root)

    @property
    def gc_guard_dir(self) -> Path:
        return self.gc_roots_dir / GC_GUARD_DIRNAME

    def archive_paths(self) -> list[str]:
        """Paths handed to the remote cache: user paths plus the snapshot directory."""
        return [*self.cache_paths, str(self.layout.dump)]

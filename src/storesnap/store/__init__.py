"""Store scanning, synchronization and GC-root handling."""

from .gc import GCRootGuard, GCRootSet, root_link_name
from .layout import CacheLayout, default_cache_root, store_dir
from .scanner import (
    compute_working_set,
    read_working_set,
    record_marker,
    reduce_to_working_set,
    scan,
    store_entry_for,
    write_scan_records,
    write_working_set,
)
from .sync import StoreSynchronizer, list_snapshot_entries, snapshot_contains, snapshot_sizes

__all__ = [
    "CacheLayout",
    "GCRootGuard",
    "GCRootSet",
    "StoreSynchronizer",
    "compute_working_set",
    "default_cache_root",
    "list_snapshot_entries",
    "read_working_set",
    "record_marker",
    "reduce_to_working_set",
    "root_link_name",
    "scan",
    "snapshot_contains",
    "snapshot_sizes",
    "store_dir",
    "store_entry_for",
    "write_scan_records",
    "write_working_set",
]

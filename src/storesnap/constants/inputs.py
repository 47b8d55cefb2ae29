"""Input names, outputs and shared state keys for the restore and save phases."""

from __future__ import annotations

INPUT_KEY: str = "key"
INPUT_RESTORE_KEYS: str = "restore-keys"
INPUT_PATH: str = "path"
INPUT_ENABLE_CROSS_OS_ARCHIVE: str = "enableCrossOsArchive"
INPUT_FAIL_ON_CACHE_MISS: str = "fail-on-cache-miss"
INPUT_LOOKUP_ONLY: str = "lookup-only"
INPUT_UPLOAD_CHUNK_SIZE: str = "upload-chunk-size"

INPUT_LINUX_KEEP_CACHE: str = "linux-keep-cache"
INPUT_MACOS_KEEP_CACHE: str = "macos-keep-cache"
INPUT_LINUX_DEBUG_ENABLED: str = "linux-debug-enabled"
INPUT_MACOS_DEBUG_ENABLED: str = "macos-debug-enabled"
INPUT_LINUX_CACHE_WORKING_SET: str = "linux-cache-working-set"
INPUT_MACOS_CACHE_WORKING_SET: str = "macos-cache-working-set"

INPUT_CHECK_SIGNATURES: str = "check-signatures"
INPUT_COLLECT_GARBAGE: str = "collect-garbage"
INPUT_CACHE_ROOT: str = "cache-root"
INPUT_CACHE_DIR: str = "cache-dir"
INPUT_STORE_ENTRY_DEPTH: str = "store-entry-depth"

ALL_INPUTS: frozenset[str] = frozenset(
    {
        INPUT_KEY,
        INPUT_RESTORE_KEYS,
        INPUT_PATH,
        INPUT_ENABLE_CROSS_OS_ARCHIVE,
        INPUT_FAIL_ON_CACHE_MISS,
        INPUT_LOOKUP_ONLY,
        INPUT_UPLOAD_CHUNK_SIZE,
        INPUT_LINUX_KEEP_CACHE,
        INPUT_MACOS_KEEP_CACHE,
        INPUT_LINUX_DEBUG_ENABLED,
        INPUT_MACOS_DEBUG_ENABLED,
        INPUT_LINUX_CACHE_WORKING_SET,
        INPUT_MACOS_CACHE_WORKING_SET,
        INPUT_CHECK_SIGNATURES,
        INPUT_COLLECT_GARBAGE,
        INPUT_CACHE_ROOT,
        INPUT_CACHE_DIR,
        INPUT_STORE_ENTRY_DEPTH,
    }
)

OUTPUT_CACHE_HIT: str = "cache-hit"

STATE_PRIMARY_KEY: str = "CACHE_KEY"
STATE_MATCHED_KEY: str = "CACHE_RESULT"

CONFIG_FILENAME: str = "storesnap.yaml"

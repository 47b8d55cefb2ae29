"""Constants for the directory-backed remote cache."""

from __future__ import annotations

CACHE_INDEX_FILENAME: str = "index.json"
CACHE_INDEX_VERSION: int = 1
CACHE_ARCHIVE_SUFFIX: str = ".tar.gz"
CACHE_TEMP_PREFIX: str = ".upload-"
CACHE_TEMP_SUFFIX: str = ".tmp"
DEFAULT_UPLOAD_CHUNK_SIZE: int = 32 * 1024 * 1024
KEY_DIGEST_LENGTH: int = 16
ARCHIVE_ROOT: str = "/"
MAX_KEY_LENGTH: int = 512

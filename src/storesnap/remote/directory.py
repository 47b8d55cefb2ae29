"""Remote cache kept as ``tar.gz`` archives in a shared directory.

Entries are immutable: saving an existing key is rejected. Lookups follow the
hosted cache: the primary key must match exactly, restore keys match by
prefix with the most recent entry winning. Archives store paths relative to
``/`` so restoring puts files back where they were saved from.
"""

from __future__ import annotations

import glob
import hashlib
import logging
import os
import sys
import tarfile
import tempfile
import time
from collections.abc import Callable, Sequence
from contextlib import suppress
from pathlib import Path

from storesnap.constants.remote import (
    ARCHIVE_ROOT,
    CACHE_ARCHIVE_SUFFIX,
    CACHE_INDEX_FILENAME,
    CACHE_INDEX_VERSION,
    CACHE_TEMP_PREFIX,
    CACHE_TEMP_SUFFIX,
    DEFAULT_UPLOAD_CHUNK_SIZE,
    KEY_DIGEST_LENGTH,
    MAX_KEY_LENGTH,
)
from storesnap.exceptions import RemoteCacheError
from storesnap.io import load_json_file, write_json_atomic
from storesnap.types import CacheIndex, CacheIndexEntry

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


class DirectoryCacheClient:
    """Cache client for self-hosted runners sharing a directory (NFS, a mounted volume, ...)."""

    def __init__(
        self,
        cache_dir: Path,
        *,
        platform: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache_dir = cache_dir
        self._platform = platform if platform is not None else sys.platform
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def index_path(self) -> Path:
        return self._cache_dir / CACHE_INDEX_FILENAME

    def is_feature_available(self) -> bool:
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("Cache directory %s is unavailable: %s", self._cache_dir, exc)
            return False
        return os.access(self._cache_dir, os.W_OK)

    def restore_cache(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
        *,
        lookup_only: bool = False,
        enable_cross_os_archive: bool = False,
    ) -> str | None:
        for key in (primary_key, *restore_keys):
            _check_key(key)

        index = self._load_index()
        version = cache_version(paths)
        matched = self._find(index, primary_key, restore_keys, version, enable_cross_os_archive)
        if matched is None:
            return None
        if lookup_only:
            return matched

        archive = self._cache_dir / index["entries"][matched]["archive"]
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(ARCHIVE_ROOT, filter="tar")
        except (OSError, tarfile.TarError) as exc:
            raise RemoteCacheError(f"Failed to extract cache archive {archive}: {exc}") from exc
        logger.info("Cache Size: ~%d MB (%d B)", archive.stat().st_size // (1024 * 1024), archive.stat().st_size)
        return matched

    def save_cache(
        self,
        paths: Sequence[str],
        key: str,
        *,
        upload_chunk_size: int | None = None,
        enable_cross_os_archive: bool = False,
    ) -> int:
        _check_key(key)
        index = self._load_index()
        if key in index["entries"]:
            raise RemoteCacheError(f"Unable to reserve cache with key {key}, another job may be creating this cache.")

        files = resolve_paths(paths)
        if not files:
            raise RemoteCacheError(
                "Path Validation Error: Path(s) specified in the action for caching do(es) not exist, "
                "hence no cache is being saved."
            )

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        cache_id = index["next_id"]
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:KEY_DIGEST_LENGTH]
        archive_name = f"{cache_id}-{digest}{CACHE_ARCHIVE_SUFFIX}"

        with tempfile.TemporaryDirectory() as staging_dir:
            staging = Path(staging_dir) / archive_name
            with tarfile.open(staging, "w:gz") as tar:
                for path in files:
                    tar.add(path, arcname=os.path.relpath(path, ARCHIVE_ROOT))
            self._upload(staging, self._cache_dir / archive_name, upload_chunk_size or DEFAULT_UPLOAD_CHUNK_SIZE)

        entry: CacheIndexEntry = {
            "cache_id": cache_id,
            "archive": archive_name,
            "version": cache_version(paths),
            "created_at": self._clock(),
            "platform": self._platform,
            "cross_os": enable_cross_os_archive,
        }
        index["entries"][key] = entry
        index["next_id"] = cache_id + 1
        write_json_atomic(
            path=self.index_path,
            payload=index,
            temp_prefix=CACHE_TEMP_PREFIX,
            temp_suffix=CACHE_TEMP_SUFFIX,
        )
        return cache_id

    def _find(
        self,
        index: CacheIndex,
        primary_key: str,
        restore_keys: Sequence[str],
        version: str,
        enable_cross_os_archive: bool,
    ) -> str | None:
        eligible = {
            key: entry
            for key, entry in index["entries"].items()
            if entry["version"] == version
            and (entry["platform"] == self._platform or (enable_cross_os_archive and entry["cross_os"]))
        }
        if primary_key in eligible:
            return primary_key
        for prefix in restore_keys:
            if prefix in eligible:
                return prefix
            candidates = [key for key in eligible if key.startswith(prefix)]
            if candidates:
                return max(candidates, key=lambda key: (eligible[key]["created_at"], eligible[key]["cache_id"]))
        return None

    def _upload(self, source: Path, target: Path, chunk_size: int) -> None:
        temp_name: str | None = None
        chunks = 0
        try:
            with source.open("rb") as reader, tempfile.NamedTemporaryFile(
                mode="wb",
                dir=target.parent,
                prefix=CACHE_TEMP_PREFIX,
                suffix=CACHE_TEMP_SUFFIX,
                delete=False,
            ) as writer:
                temp_name = writer.name
                for chunk in iter(lambda: reader.read(chunk_size), b""):
                    writer.write(chunk)
                    chunks += 1
        except Exception:
            if temp_name:
                with suppress(FileNotFoundError):
                    Path(temp_name).unlink()
            raise

        assert temp_name is not None
        os.replace(temp_name, target)
        logger.debug("Uploaded %s in %d chunk(s)", target.name, chunks)

    def _load_index(self) -> CacheIndex:
        if not self.index_path.is_file():
            return _new_index()
        try:
            raw = load_json_file(self.index_path)
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable cache index %s", self.index_path)
            return _new_index()
        if not isinstance(raw, dict) or raw.get("version") != CACHE_INDEX_VERSION:
            return _new_index()

        entries: dict[str, CacheIndexEntry] = {}
        raw_entries = raw.get("entries")
        if isinstance(raw_entries, dict):
            for key, value in raw_entries.items():
                entry = _normalize_entry(value)
                if isinstance(key, str) and entry is not None:
                    entries[key] = entry

        next_id = raw.get("next_id")
        if not isinstance(next_id, int) or next_id < 0:
            next_id = max((entry["cache_id"] for entry in entries.values()), default=-1) + 1
        return {"version": CACHE_INDEX_VERSION, "next_id": next_id, "entries": entries}


def cache_version(paths: Sequence[str]) -> str:
    """Fingerprint the path list so an entry only restores into the same set of paths."""
    return hashlib.sha256("|".join(paths).encode("utf-8")).hexdigest()


def resolve_paths(patterns: Sequence[str]) -> list[str]:
    """Expand path patterns to existing absolute paths; ``!pattern`` excludes matches."""
    included: dict[str, None] = {}
    excluded: set[str] = set()
    for pattern in patterns:
        negate = pattern.startswith("!")
        matches = _expand(pattern[1:] if negate else pattern)
        if negate:
            excluded.update(matches)
        else:
            included.update(dict.fromkeys(matches))
    return [path for path in included if path not in excluded]


def _expand(pattern: str) -> list[str]:
    expanded = os.path.expanduser(pattern)
    if _GLOB_CHARS.intersection(expanded):
        return sorted(os.path.abspath(match) for match in glob.glob(expanded, recursive=True))
    if os.path.lexists(expanded):
        return [os.path.abspath(expanded)]
    return []


def _check_key(key: str) -> None:
    if len(key) > MAX_KEY_LENGTH:
        raise RemoteCacheError(f"Key Validation Error: {key} cannot be larger than {MAX_KEY_LENGTH} characters.")
    if "," in key:
        raise RemoteCacheError(f"Key Validation Error: {key} cannot contain commas.")


def _normalize_entry(value: object) -> CacheIndexEntry | None:
    if not isinstance(value, dict):
        return None
    cache_id = value.get("cache_id")
    archive = value.get("archive")
    version = value.get("version")
    created_at = value.get("created_at")
    platform = value.get("platform")
    cross_os = value.get("cross_os")
    if not isinstance(cache_id, int) or not isinstance(archive, str) or not isinstance(version, str):
        return None
    if not isinstance(created_at, (int, float)) or not isinstance(platform, str) or not isinstance(cross_os, bool):
        return None
    return {
        "cache_id": cache_id,
        "archive": archive,
        "version": version,
        "created_at": float(created_at),
        "platform": platform,
        "cross_os": cross_os,
    }


def _new_index() -> CacheIndex:
    return {"version": CACHE_INDEX_VERSION, "next_id": 0, "entries": {}}

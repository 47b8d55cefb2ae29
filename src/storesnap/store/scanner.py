"""Working-set scanner: which store entries did this job touch?

The scan walks ``<prefix>/nix/store`` to a bounded depth, keeps paths whose
access time is newer (or not newer) than the time marker, and reduces each
match to the top-level store entry that contains it.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

from storesnap.constants.layout import LIVE_STORE_PREFIX, WORKING_SET_TEMP_PREFIX, WORKING_SET_TEMP_SUFFIX
from storesnap.constants.store import DEFAULT_STORE_ENTRY_DEPTH, STORE_ENTRY_SEPARATOR
from storesnap.io import write_text_atomic
from storesnap.store.layout import store_dir
from storesnap.types import ScanRecord, StoreEntry, WorkingSet

logger = logging.getLogger(__name__)


def scan(
    marker: Path,
    max_depth: int,
    newer_than_marker: bool,
    *,
    root: Path = LIVE_STORE_PREFIX,
) -> list[ScanRecord]:
    """Return ``(access_time, path)`` records for store paths on one side of *marker*.

    *root* is the prefix holding ``nix/store`` (``/`` for the live store, a
    snapshot directory otherwise). Paths are compared by access time against
    the marker's modification time; ``newer_than_marker`` selects paths
    touched after the marker, otherwise the untouched ones. ``max_depth``
    counts levels below the store directory, so 1 means direct children only.
    """
    reference = marker.stat().st_mtime
    base = store_dir(root)
    records: list[ScanRecord] = []
    for path, access_time in _walk(base, max_depth):
        relative = path.relative_to(base).as_posix()
        if STORE_ENTRY_SEPARATOR not in relative:
            continue
        if (access_time > reference) == newer_than_marker:
            records.append(ScanRecord(access_time, path))
    return records


def store_entry_for(
    record: ScanRecord,
    *,
    root: Path = LIVE_STORE_PREFIX,
    depth: int = DEFAULT_STORE_ENTRY_DEPTH,
) -> StoreEntry:
    """Reduce a scanned path to the store entry made of its first *depth* segments below *root*.

    The identifier is rendered as a live-store path (``/nix/store/<entry>``)
    whatever prefix was scanned.
    """
    parts = record.path.relative_to(root).parts[:depth]
    return StoreEntry(
        identifier=str(PurePosixPath("/", *parts)),
        absolute_path=root.joinpath(*parts),
        access_time=record.access_time,
    )


def reduce_to_working_set(
    records: Iterable[ScanRecord],
    *,
    root: Path = LIVE_STORE_PREFIX,
    depth: int = DEFAULT_STORE_ENTRY_DEPTH,
) -> WorkingSet:
    """Deduplicate records into store identifiers, dropping build recipes."""
    identifiers: set[str] = set()
    for record in records:
        entry = store_entry_for(record, root=root, depth=depth)
        if entry.is_build_recipe:
            continue
        identifiers.add(entry.identifier)
    return frozenset(identifiers)


def compute_working_set(
    marker: Path,
    max_depth: int,
    *,
    root: Path = LIVE_STORE_PREFIX,
    depth: int = DEFAULT_STORE_ENTRY_DEPTH,
) -> WorkingSet:
    """Scan for paths accessed after *marker* and reduce them to a working set."""
    records = scan(marker, max_depth, True, root=root)
    working_set = reduce_to_working_set(records, root=root, depth=depth)
    logger.debug("Reduced %d accessed path(s) to %d store entries", len(records), len(working_set))
    return working_set


def write_working_set(path: Path, working_set: WorkingSet) -> None:
    """Write identifiers one per line, sorted for stable diffs."""
    content = "".join(f"{identifier}\n" for identifier in sorted(working_set))
    write_text_atomic(
        path=path,
        content=content,
        temp_prefix=WORKING_SET_TEMP_PREFIX,
        temp_suffix=WORKING_SET_TEMP_SUFFIX,
    )


def read_working_set(path: Path) -> WorkingSet:
    return frozenset(line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip())


def write_scan_records(path: Path, records: Iterable[ScanRecord]) -> None:
    content = "".join(f"{record.format()}\n" for record in records)
    write_text_atomic(
        path=path,
        content=content,
        temp_prefix=WORKING_SET_TEMP_PREFIX,
        temp_suffix=WORKING_SET_TEMP_SUFFIX,
    )


def _walk(directory: Path, max_depth: int, depth: int = 1) -> Iterator[tuple[Path, float]]:
    """Yield ``(path, atime)`` for entries up to *max_depth* levels below *directory*.

    Symlinks are reported with their own (lstat) times and never followed.
    """
    if depth > max_depth:
        return
    try:
        entries = os.scandir(directory)
    except (FileNotFoundError, NotADirectoryError):
        return
    with entries:
        for entry in entries:
            try:
                info = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue
            yield Path(entry.path), info.st_atime
            if entry.is_dir(follow_symlinks=False):
                yield from _walk(Path(entry.path), max_depth, depth + 1)


def record_marker(marker: Path, *, now: float | None = None) -> float:
    """Create (or re-stamp) the time marker and return the timestamp it carries."""
    started = time.time() if now is None else now
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.touch()
    os.utime(marker, (started, started))
    return started

"""Save phase: export the job's working set into the snapshot and upload it."""

from __future__ import annotations

import logging

from storesnap.config import InputSource, SnapshotSettings, get_input
from storesnap.constants.inputs import INPUT_KEY, STATE_PRIMARY_KEY
from storesnap.constants.store import SAVE_SCAN_MAX_DEPTH
from storesnap.exceptions import StoreSnapError
from storesnap.io import CommandExecutor, clear_directory
from storesnap.keys import is_exact_match
from storesnap.phases.common import is_cache_feature_available, print_paths_all, warn_invalid_event
from storesnap.remote import RemoteCacheClient
from storesnap.reporting import log_block, log_block_debug, log_lines
from storesnap.runner import Environment, StateProvider
from storesnap.store import (
    GCRootGuard,
    StoreSynchronizer,
    reduce_to_working_set,
    scan,
    snapshot_sizes,
    write_scan_records,
    write_working_set,
)
from storesnap.types import WorkingSet

logger = logging.getLogger(__name__)


def save_snapshot(
    *,
    inputs: InputSource,
    settings: SnapshotSettings,
    client: RemoteCacheClient,
    state: StateProvider,
    environment: Environment,
    executor: CommandExecutor,
) -> int:
    """Run the save phase and return the remote cache id, or -1 when nothing was saved.

    Nothing in this phase fails the job: errors are logged as warnings.
    """
    cache_id = -1
    try:
        if not is_cache_feature_available(client, environment):
            return cache_id

        if not environment.is_valid_event():
            warn_invalid_event(environment)
            return cache_id

        primary_key = state.get_state(STATE_PRIMARY_KEY) or get_input(inputs, INPUT_KEY)
        if not primary_key:
            logger.warning("Key is not specified.")
            return cache_id

        restored_key = state.get_cache_state()
        if is_exact_match(primary_key, restored_key):
            logger.info("Cache hit occurred on the primary key %s, not saving cache.", primary_key)
            return cache_id

        export_snapshot(settings=settings, executor=executor)

        cache_id = client.save_cache(
            settings.archive_paths(),
            primary_key,
            upload_chunk_size=settings.upload_chunk_size,
            enable_cross_os_archive=settings.enable_cross_os_archive,
        )
        if cache_id != -1:
            logger.info("Cache saved with key: %s", primary_key)
    except Exception as exc:
        logger.warning(str(exc))
    return cache_id


def export_snapshot(*, settings: SnapshotSettings, executor: CommandExecutor) -> WorkingSet | None:
    """Populate the snapshot directory from the live store.

    With working-set tracking only the entries touched since the time marker
    (and their closures) are exported; otherwise the whole store is. Returns
    the working set that was exported, or ``None`` for a full export or a
    failed one.
    """
    layout = settings.layout
    try:
        with log_block(f"Creating the {layout.dump} directory if missing."):
            layout.ensure()
        layout.reset_logs()

        working_set: WorkingSet | None = None
        if settings.cache_working_set:
            working_set = compute_job_working_set(settings)
            if settings.collect_garbage:
                collect_outside_working_set(settings, executor, working_set)

        if not settings.keep_cache:
            with log_block("Removing existing cache."):
                clear_directory(layout.dump)

        synchronizer = StoreSynchronizer(
            executor,
            check_signatures=settings.check_signatures,
            stderr_log=layout.logs,
        )
        try:
            if working_set is not None:
                with log_block(f"Copying top store paths with their closures to {layout.dump_store}."):
                    synchronizer.export_closure(working_set, layout.dump)
            else:
                with log_block(f"Copying all store paths to {layout.dump}."):
                    synchronizer.export_all(layout.dump)
        finally:
            if settings.debug_enabled:
                log_lines(layout.read_logs())

        with log_block("Printing paths to be cached."):
            for line in snapshot_sizes(layout.dump):
                logger.info(line)
        return working_set
    except (StoreSnapError, OSError) as exc:
        logger.error("Failed to save Nix cache: %s", exc)
        return None


def compute_job_working_set(settings: SnapshotSettings) -> WorkingSet:
    """Scan for store paths accessed since the restore phase and record them."""
    layout = settings.layout
    marker = layout.time_marker
    if not marker.is_file():
        raise StoreSnapError(
            f"Time marker {marker} is missing; restore must run with working-set tracking enabled first."
        )

    with log_block(f'Reading "{marker}" modification time.'):
        logger.info("%.10f %s", marker.stat().st_mtime, marker)

    with log_block(f'Recording /nix/store files accessed after accessing "{marker}".'):
        records = scan(marker, SAVE_SCAN_MAX_DEPTH, True, root=settings.store_prefix)
        write_scan_records(layout.working_set_tmp, records)

    if settings.debug_enabled:
        with log_block_debug(f"Printing paths categorized w.r.t. {marker}"):
            print_paths_all(marker, SAVE_SCAN_MAX_DEPTH, root=settings.store_prefix)

    with log_block(
        "Recording top store paths of accessed files. "
        'For "/nix/store/top/path", the top store path is "/nix/store/top".'
    ):
        working_set = reduce_to_working_set(records, root=settings.store_prefix, depth=settings.store_entry_depth)
        write_working_set(layout.working_set, working_set)

    if settings.debug_enabled:
        with log_block_debug("Printing top store paths to be cached."):
            for identifier in sorted(working_set):
                logger.info(identifier)
    return working_set


def collect_outside_working_set(
    settings: SnapshotSettings,
    executor: CommandExecutor,
    working_set: WorkingSet,
) -> None:
    """Run garbage collection with the working set pinned; a failure only skips the collection."""
    try:
        with log_block("Collecting garbage outside the working set."):
            GCRootGuard(executor, settings.gc_guard_dir).reconcile(working_set)
    except (StoreSnapError, OSError) as exc:
        logger.error("Failed to collect garbage: %s", exc)

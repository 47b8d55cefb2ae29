"""Restore phase: fetch the snapshot, import it into the store, stamp the job start."""

from __future__ import annotations

import logging

from storesnap.config import InputSource, SnapshotSettings
from storesnap.constants.inputs import OUTPUT_CACHE_HIT, STATE_MATCHED_KEY, STATE_PRIMARY_KEY
from storesnap.constants.store import DIAGNOSTIC_SCAN_MAX_DEPTH
from storesnap.exceptions import CacheMissError, StoreSnapError, StoreSyncError
from storesnap.io import CommandExecutor, clear_directory
from storesnap.keys import is_exact_hit, resolve_cache_key
from storesnap.phases.common import is_cache_feature_available, print_paths_all, warn_invalid_event
from storesnap.remote import RemoteCacheClient
from storesnap.reporting import log_block, log_lines
from storesnap.runner import Environment, StateProvider
from storesnap.store import StoreSynchronizer, list_snapshot_entries, record_marker

logger = logging.getLogger(__name__)


def restore_snapshot(
    *,
    inputs: InputSource,
    settings: SnapshotSettings,
    client: RemoteCacheClient,
    state: StateProvider,
    environment: Environment,
    executor: CommandExecutor,
) -> str | None:
    """Run the restore phase and return the matched cache key, if any.

    Remote-cache failures fail the job through ``environment.set_failed``.
    Store import failures are only logged: the job then runs without a
    pre-populated store.
    """
    try:
        if not is_cache_feature_available(client, environment):
            environment.set_output(OUTPUT_CACHE_HIT, "false")
            return None

        if not environment.is_valid_event():
            warn_invalid_event(environment)
            return None

        cache_key = resolve_cache_key(inputs)
        state.set_state(STATE_PRIMARY_KEY, cache_key.primary)

        matched = client.restore_cache(
            settings.archive_paths(),
            cache_key.primary,
            list(cache_key.restore_fallbacks),
            lookup_only=settings.lookup_only,
            enable_cross_os_archive=settings.enable_cross_os_archive,
        )

        import_snapshot(settings=settings, executor=executor)

        if not matched:
            if settings.fail_on_cache_miss:
                raise CacheMissError(cache_key.primary)
            logger.info("Cache not found for input keys: %s", ", ".join(cache_key.lookup_keys))
            environment.set_output(OUTPUT_CACHE_HIT, "false")
            return None

        state.set_state(STATE_MATCHED_KEY, matched)
        cache_key = cache_key.with_match(matched)
        environment.set_output(OUTPUT_CACHE_HIT, str(is_exact_hit(cache_key)).lower())

        if settings.lookup_only:
            logger.info("Cache found and can be restored from key: %s", matched)
        else:
            logger.info("Cache restored from key: %s", matched)
        return matched
    except Exception as exc:
        environment.set_failed(str(exc))
        return None


def import_snapshot(*, settings: SnapshotSettings, executor: CommandExecutor) -> None:
    """Copy the downloaded snapshot into the live store and record the time marker."""
    layout = settings.layout
    try:
        layout.ensure()
        layout.reset_logs()

        with log_block("Copying Nix store paths from a cache."):
            if list_snapshot_entries(layout.dump):
                with log_block(f'Importing nix store paths from "{layout.dump}".'):
                    synchronizer = StoreSynchronizer(
                        executor,
                        check_signatures=settings.check_signatures,
                        stderr_log=layout.logs,
                    )
                    try:
                        synchronizer.import_all(layout.dump)
                    except StoreSyncError as exc:
                        logger.error("Failed to restore Nix cache: %s", exc)
                    log_lines(layout.read_logs())
            else:
                logger.info('No store paths to import from "%s".', layout.dump)

            if not settings.keep_cache:
                with log_block(f'Removing the imported snapshot from "{layout.dump}".'):
                    clear_directory(layout.dump)

        if settings.cache_working_set:
            started = record_marker(layout.time_marker)
            logger.info('Recorded start time (%s) by creating a file "%s".', started, layout.time_marker)

        if settings.debug_enabled:
            if layout.time_marker.is_file():
                print_paths_all(layout.time_marker, DIAGNOSTIC_SCAN_MAX_DEPTH, root=settings.store_prefix)
            else:
                logger.info("No time marker at %s; skipping access-time listings.", layout.time_marker)
    except (StoreSnapError, OSError) as exc:
        logger.error("Failed to restore Nix cache: %s", exc)

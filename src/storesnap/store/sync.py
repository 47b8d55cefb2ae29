"""Copy store entries between the live store and a snapshot directory."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from storesnap.constants.layout import STORE_RELATIVE_PATH
from storesnap.constants.store import NIX_BIN, STORE_ENTRY_SEPARATOR
from storesnap.exceptions import CommandError, StoreSyncError
from storesnap.io import CommandExecutor, format_size, tree_size
from storesnap.store.layout import store_dir

logger = logging.getLogger(__name__)


class StoreSynchronizer:
    """Drive ``nix copy`` in either direction between the live store and a snapshot.

    Each entry is copied by its own command so a broken entry never blocks the
    others; failures are collected and reported together as ``StoreSyncError``
    once every entry has been attempted.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        *,
        check_signatures: bool = False,
        stderr_log: Path | None = None,
        nix: str = NIX_BIN,
    ) -> None:
        self._executor = executor
        self._check_signatures = check_signatures
        self._stderr_log = stderr_log
        self._nix = nix

    def import_all(self, snapshot: Path) -> tuple[str, ...]:
        """Copy every entry of *snapshot* into the live store; return the identifiers imported."""
        snapshot_store = store_dir(snapshot)
        snapshot_store.mkdir(parents=True, exist_ok=True)
        identifiers = list_snapshot_entries(snapshot)
        if not self._check_signatures:
            logger.warning(
                "Importing %d store path(s) from %s without signature verification; "
                "the snapshot is trusted as produced by this pipeline.",
                len(identifiers),
                snapshot,
            )
        copied, failed = self._copy_each(identifiers, ["--from", str(snapshot)])
        if failed:
            raise StoreSyncError("Import", failed)
        return copied

    def export_closure(self, entries: Iterable[str], snapshot: Path) -> tuple[str, ...]:
        """Copy each entry and its closure into *snapshot*, skipping entries already there.

        Returns the identifiers that were actually copied.
        """
        pending: list[str] = []
        for identifier in sorted(set(entries)):
            if snapshot_contains(snapshot, identifier):
                logger.debug("Already in snapshot: %s", identifier)
                continue
            pending.append(identifier)
        copied, failed = self._copy_each(pending, ["--to", str(snapshot)])
        if failed:
            raise StoreSyncError("Export", failed)
        return copied

    def export_all(self, snapshot: Path) -> None:
        """Copy every live-store entry into *snapshot*."""
        try:
            self._executor.run(
                [*self._copy_command(), "--all", "--to", str(snapshot)],
                stderr_log=self._stderr_log,
            )
        except CommandError as exc:
            raise StoreSyncError("Export of all store paths", ["--all"]) from exc

    def _copy_command(self) -> list[str]:
        command = [self._nix, "copy"]
        if not self._check_signatures:
            command.append("--no-check-sigs")
        return command

    def _copy_each(self, identifiers: Iterable[str], direction: list[str]) -> tuple[tuple[str, ...], list[str]]:
        copied: list[str] = []
        failed: list[str] = []
        for identifier in identifiers:
            try:
                self._executor.run(
                    [*self._copy_command(), *direction, identifier],
                    stderr_log=self._stderr_log,
                )
            except CommandError as exc:
                logger.error("Failed to copy %s: %s", identifier, exc)
                failed.append(identifier)
                continue
            copied.append(identifier)
        return tuple(copied), failed


def list_snapshot_entries(snapshot: Path) -> tuple[str, ...]:
    """Return live-store identifiers for the top-level entries of *snapshot*."""
    snapshot_store = store_dir(snapshot)
    if not snapshot_store.is_dir():
        return ()
    return tuple(
        str(PurePosixPath("/") / STORE_RELATIVE_PATH / child.name)
        for child in sorted(snapshot_store.iterdir())
        if STORE_ENTRY_SEPARATOR in child.name
    )


def snapshot_contains(snapshot: Path, identifier: str) -> bool:
    path = snapshot / identifier.lstrip("/")
    return path.exists() or path.is_symlink()


def snapshot_sizes(snapshot: Path) -> list[str]:
    """Render ``<size>\\t<path>`` lines for each top-level entry of the snapshot store."""
    snapshot_store = store_dir(snapshot)
    if not snapshot_store.is_dir():
        return []
    return [f"{format_size(tree_size(child))}\t{child}" for child in sorted(snapshot_store.iterdir())]

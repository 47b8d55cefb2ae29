"""Pin store entries with GC roots while the collector runs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from storesnap.constants.layout import STORE_RELATIVE_PATH
from storesnap.constants.store import NIX_BIN, STORE_ENTRY_SEPARATOR
from storesnap.exceptions import GCRootError
from storesnap.io import CommandExecutor, clear_path
from storesnap.types import WorkingSet

logger = logging.getLogger(__name__)

_STORE_PARTS = PurePosixPath("/", STORE_RELATIVE_PATH).parts


@dataclass(frozen=True)
class GCRootSet:
    """Symlinks registered as GC roots for one pin window."""

    directory: Path
    entries: WorkingSet
    links: tuple[Path, ...]


class GCRootGuard:
    """Register a directory of root links, collect garbage, then drop the links.

    The collector may only run while a pin window is open; calling
    ``collect_garbage`` outside ``pinned`` raises ``GCRootError``.
    """

    def __init__(self, executor: CommandExecutor, guard_dir: Path, *, nix: str = NIX_BIN) -> None:
        self._executor = executor
        self._guard_dir = guard_dir
        self._nix = nix
        self._active: GCRootSet | None = None

    @property
    def active(self) -> GCRootSet | None:
        return self._active

    def pin(self, entries: Iterable[str]) -> GCRootSet:
        """Create one root link per entry under a fresh guard directory."""
        if self._active is not None:
            raise GCRootError(f"GC roots are already pinned under {self._active.directory}")
        pinned = frozenset(entries)
        clear_path(self._guard_dir)
        self._guard_dir.mkdir(parents=True)
        links: list[Path] = []
        for identifier in sorted(pinned):
            link = self._guard_dir / root_link_name(identifier)
            link.symlink_to(identifier)
            links.append(link)
        self._active = GCRootSet(directory=self._guard_dir, entries=pinned, links=tuple(links))
        logger.info("Pinned %d store path(s) under %s", len(links), self._guard_dir)
        return self._active

    def collect_garbage(self) -> None:
        if self._active is None:
            raise GCRootError("Refusing to collect garbage without pinned GC roots")
        self._executor.run([self._nix, "store", "gc"])

    def release(self, roots: GCRootSet) -> None:
        clear_path(roots.directory)
        if self._active is roots:
            self._active = None
        logger.info("Released %d GC root(s) under %s", len(roots.links), roots.directory)

    @contextmanager
    def pinned(self, entries: Iterable[str]) -> Iterator[GCRootSet]:
        """Keep *entries* rooted for the duration of the block, releasing on every exit path."""
        roots = self.pin(entries)
        try:
            yield roots
        finally:
            self.release(roots)

    def reconcile(self, entries: Iterable[str]) -> None:
        """Collect everything not in *entries* (or otherwise rooted)."""
        with self.pinned(entries):
            self.collect_garbage()


def root_link_name(identifier: str) -> str:
    """Name the root link after every segment below the store directory.

    ``/nix/store/<entry>`` keeps the entry name; deeper identifiers such as
    ``/nix/store/<entry>/bin`` become ``<entry>-bin`` so links never collide.
    """
    parts = PurePosixPath(identifier).parts[len(_STORE_PARTS) :]
    if not parts:
        raise GCRootError(f"Not a store path: {identifier}")
    return STORE_ENTRY_SEPARATOR.join(parts)

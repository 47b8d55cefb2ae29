"""Store synchronization and garbage-collection exceptions."""

from __future__ import annotations

from collections.abc import Iterable

from storesnap.exceptions.base import StoreSnapError


class StoreSyncError(StoreSnapError):
    """Raised after a copy step in which one or more store entries failed."""

    def __init__(self, operation: str, failed: Iterable[str]) -> None:
        self.operation = operation
        self.failed = tuple(sorted(failed))
        super().__init__(f"{operation} failed for {len(self.failed)} store path(s): {', '.join(self.failed)}")


class GCRootError(StoreSnapError):
    """Raised when garbage collection is requested outside a pin window."""

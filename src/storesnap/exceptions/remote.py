"""Remote cache exceptions."""

from __future__ import annotations

from storesnap.exceptions.base import StoreSnapError


class RemoteCacheError(StoreSnapError):
    """Raised when the remote cache rejects a lookup or upload."""


class CacheMissError(StoreSnapError):
    """Raised when no cache entry matched and fail-on-cache-miss is set."""

    def __init__(self, primary_key: str) -> None:
        self.primary_key = primary_key
        super().__init__(
            f"Failed to restore cache entry. Exiting as fail-on-cache-miss is set. Input key: {primary_key}"
        )

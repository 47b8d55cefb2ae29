"""Port for the remote blob cache that transports snapshot archives."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class RemoteCacheClient(Protocol):
    """Store and retrieve a named archive of files.

    ``restore_cache`` returns the key that matched (the primary key or one
    found through a restore-key prefix), or ``None`` on a miss.
    ``save_cache`` returns a non-negative cache id on success.
    """

    def is_feature_available(self) -> bool: ...

    def restore_cache(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
        *,
        lookup_only: bool = False,
        enable_cross_os_archive: bool = False,
    ) -> str | None: ...

    def save_cache(
        self,
        paths: Sequence[str],
        key: str,
        *,
        upload_chunk_size: int | None = None,
        enable_cross_os_archive: bool = False,
    ) -> int: ...

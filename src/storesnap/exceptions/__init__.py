"""Shared exception hierarchy for storesnap."""

from __future__ import annotations

from .base import StoreSnapError
from .config import ConfigError
from .remote import CacheMissError, RemoteCacheError
from .shell import CommandError
from .store import GCRootError, StoreSyncError

__all__ = [
    "CacheMissError",
    "CommandError",
    "ConfigError",
    "GCRootError",
    "RemoteCacheError",
    "StoreSnapError",
    "StoreSyncError",
]

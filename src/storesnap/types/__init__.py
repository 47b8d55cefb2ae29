"""Shared type aliases for storesnap."""

from .cache import CacheIndex, CacheIndexEntry, CacheKey, StatePayload
from .common import ScanDirection, StoreIdentifier, WorkingSet
from .store import ScanRecord, StoreEntry

__all__ = [
    "CacheIndex",
    "CacheIndexEntry",
    "CacheKey",
    "ScanDirection",
    "ScanRecord",
    "StatePayload",
    "StoreEntry",
    "StoreIdentifier",
    "WorkingSet",
]

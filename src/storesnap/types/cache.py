"""Typed cache-key and persisted-state structures."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypedDict


@dataclass(frozen=True)
class CacheKey:
    """Primary key, ordered fallbacks and the key a lookup actually matched."""

    primary: str
    restore_fallbacks: tuple[str, ...] = ()
    matched: str | None = None

    @property
    def lookup_keys(self) -> tuple[str, ...]:
        return (self.primary, *self.restore_fallbacks)

    def with_match(self, matched: str | None) -> CacheKey:
        """Return a copy carrying the matched key; a key can only be matched once."""
        if self.matched is not None:
            raise ValueError(f"Cache key {self.primary!r} already matched {self.matched!r}")
        return replace(self, matched=matched)


class StatePayload(TypedDict):
    """Top-level payload of the file-backed state store."""

    version: int
    state: dict[str, str]


class CacheIndexEntry(TypedDict):
    """Metadata for one archive in the directory-backed cache."""

    cache_id: int
    archive: str
    version: str
    created_at: float
    platform: str
    cross_os: bool


class CacheIndex(TypedDict):
    """Index of all archives in the directory-backed cache."""

    version: int
    next_id: int
    entries: dict[str, CacheIndexEntry]

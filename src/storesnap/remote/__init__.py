"""Remote cache clients."""

from .base import RemoteCacheClient
from .directory import DirectoryCacheClient, cache_version, resolve_paths

__all__ = ["DirectoryCacheClient", "RemoteCacheClient", "cache_version", "resolve_paths"]

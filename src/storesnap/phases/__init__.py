"""Restore and save phase orchestration."""

from __future__ import annotations

from typing import Any

__all__ = ["export_snapshot", "import_snapshot", "restore_snapshot", "save_snapshot"]


def __getattr__(name: str) -> Any:
    """Lazily expose phase entry points to avoid import cycles at package import time."""
    if name in ("restore_snapshot", "import_snapshot"):
        from . import restore

        return getattr(restore, name)
    if name in ("save_snapshot", "export_snapshot"):
        from . import save

        return getattr(save, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

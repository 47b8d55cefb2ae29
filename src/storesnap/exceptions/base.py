"""Base exception for storesnap."""

from __future__ import annotations


class StoreSnapError(Exception):
    """Base error for all storesnap failures."""

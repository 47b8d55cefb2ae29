"""Configuration-related exceptions."""

from __future__ import annotations

from storesnap.exceptions.base import StoreSnapError


class ConfigError(StoreSnapError, ValueError):
    """Raised when an input is missing or has an invalid value."""

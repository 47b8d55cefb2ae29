"""Common type aliases."""

from __future__ import annotations

from typing import Literal

StoreIdentifier = str
WorkingSet = frozenset[StoreIdentifier]
ScanDirection = Literal["after", "before"]

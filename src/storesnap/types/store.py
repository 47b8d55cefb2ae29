"""Typed records produced by the store scanner."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from storesnap.constants.store import BUILD_RECIPE_SUFFIX
from storesnap.types.common import StoreIdentifier


class ScanRecord(NamedTuple):
    """One path matched by a store scan, with its access time in epoch seconds."""

    access_time: float
    path: Path

    def format(self) -> str:
        """Render like ``find -printf "%A@ %p"``."""
        return f"{self.access_time:.10f} {self.path}"


@dataclass(frozen=True)
class StoreEntry:
    """A top-level store entry reached through an accessed path."""

    identifier: StoreIdentifier
    absolute_path: Path
    access_time: float

    @property
    def is_build_recipe(self) -> bool:
        return self.identifier.endswith(BUILD_RECIPE_SUFFIX)

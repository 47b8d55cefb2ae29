"""Input sources, typed accessors and resolved settings.

This package facade re-exports the public names so callers can write
``from storesnap.config import load_settings``.
"""

from __future__ import annotations

from storesnap.config.inputs import (
    get_input,
    get_input_as_array,
    get_input_as_bool,
    get_input_as_int,
    get_platform_input_as_bool,
)
from storesnap.config.loader import build_input_source, load_input_file, load_settings
from storesnap.config.model import SnapshotSettings
from storesnap.config.sources import ChainedInputSource, EnvInputSource, InputSource, MappingInputSource

__all__ = [
    "ChainedInputSource",
    "EnvInputSource",
    "InputSource",
    "MappingInputSource",
    "SnapshotSettings",
    "build_input_source",
    "get_input",
    "get_input_as_array",
    "get_input_as_bool",
    "get_input_as_int",
    "get_platform_input_as_bool",
    "load_input_file",
    "load_settings",
]

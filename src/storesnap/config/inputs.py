"""Typed accessors over an input source."""

from __future__ import annotations

import re

from storesnap.config.sources import InputSource
from storesnap.constants.layout import LINUX_PLATFORM, MACOS_PLATFORM
from storesnap.exceptions import ConfigError

_NEGATION_SPACING = re.compile(r"^!\s+")


def get_input(source: InputSource, name: str, *, required: bool = False) -> str:
    """Return the trimmed value of *name*, raising ``ConfigError`` if required and unset."""
    value = source.get(name).strip()
    if required and not value:
        raise ConfigError(f"Input required and not supplied: {name}")
    return value


def get_input_as_array(source: InputSource, name: str, *, required: bool = False) -> list[str]:
    """Split a newline-delimited input into trimmed, non-blank entries.

    A leading ``!`` followed by whitespace is collapsed so that exclusion
    patterns such as ``! build/`` survive as ``!build/``.
    """
    raw_lines = get_input(source, name, required=required).split("\n")
    lines = (_NEGATION_SPACING.sub("!", raw).strip() for raw in raw_lines)
    return [line for line in lines if line]


def get_input_as_bool(source: InputSource, name: str, *, required: bool = False) -> bool:
    return get_input(source, name, required=required).lower() == "true"


def get_input_as_int(source: InputSource, name: str, *, required: bool = False) -> int | None:
    """Parse a non-negative integer input; anything else reads as ``None``."""
    raw = get_input(source, name, required=required)
    match = re.match(r"^[+-]?\d+", raw)
    if match is None:
        return None
    value = int(match.group(0))
    if value < 0:
        return None
    return value


def get_platform_input_as_bool(
    source: InputSource,
    linux_name: str,
    macos_name: str,
    *,
    platform: str,
) -> bool:
    """Read the flag qualified for the current OS; other platforms always read ``False``."""
    if platform.startswith(LINUX_PLATFORM):
        return get_input_as_bool(source, linux_name)
    if platform == MACOS_PLATFORM:
        return get_input_as_bool(source, macos_name)
    return False

"""Sources of raw input values: runner environment and YAML config files."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Protocol

from storesnap.constants.actions import INPUT_ENV_PREFIX


class InputSource(Protocol):
    """Port for reading raw input values; unset inputs read as an empty string."""

    def get(self, name: str) -> str: ...


class EnvInputSource:
    """Read ``INPUT_<NAME>`` variables the way the hosted runner exposes step inputs."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def get(self, name: str) -> str:
        return self._environ.get(input_env_name(name), "")


class MappingInputSource:
    """Serve inputs from an in-memory mapping, typically loaded from ``storesnap.yaml``."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def get(self, name: str) -> str:
        return self._values.get(name, "")


class ChainedInputSource:
    """Return the first non-empty value across several sources."""

    def __init__(self, *sources: InputSource) -> None:
        self._sources = sources

    def get(self, name: str) -> str:
        for source in self._sources:
            value = source.get(name)
            if value.strip():
                return value
        return ""


def input_env_name(name: str) -> str:
    """Return the environment variable name carrying input *name*."""
    return f"{INPUT_ENV_PREFIX}{name.replace(' ', '_').upper()}"

"""Key/value state carried from the restore phase to the save phase of one job."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from storesnap.constants.actions import ENV_STATE_FILE, STATE_ENV_PREFIX
from storesnap.constants.inputs import STATE_MATCHED_KEY
from storesnap.constants.state import STATE_FILE_VERSION, STATE_TEMP_PREFIX, STATE_TEMP_SUFFIX
from storesnap.exceptions import ConfigError
from storesnap.io import load_json_file, write_json_atomic
from storesnap.types import StatePayload

logger = logging.getLogger(__name__)


class StateProvider(Protocol):
    """Port for job-scoped state; unset keys read as an empty string."""

    def set_state(self, name: str, value: str) -> None: ...

    def get_state(self, name: str) -> str: ...

    def get_cache_state(self) -> str | None: ...


class _CacheStateMixin(ABC):
    @abstractmethod
    def get_state(self, name: str) -> str:
        """Return the value stored under *name*, or an empty string."""

    def get_cache_state(self) -> str | None:
        """Return the key matched during restore, if any."""
        matched = self.get_state(STATE_MATCHED_KEY)
        if matched:
            logger.debug("Cache state/key: %s", matched)
            return matched
        return None


class ActionsStateProvider(_CacheStateMixin):
    """Write ``name=value`` lines to ``GITHUB_STATE``; read them back from ``STATE_<name>``.

    The runner only exposes saved state to later steps, so values set in this
    process are also kept in memory.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ
        self._local: dict[str, str] = {}

    def set_state(self, name: str, value: str) -> None:
        if "\n" in value:
            raise ConfigError(f"State value for {name} must be a single line")
        self._local[name] = value
        state_file = self._environ.get(ENV_STATE_FILE, "")
        if not state_file:
            logger.warning("%s is not set; state %s will not reach the save phase", ENV_STATE_FILE, name)
            return
        with Path(state_file).open("a", encoding="utf-8") as handle:
            handle.write(f"{name}={value}\n")

    def get_state(self, name: str) -> str:
        if name in self._local:
            return self._local[name]
        return self._environ.get(f"{STATE_ENV_PREFIX}{name}", "")


class FileStateProvider(_CacheStateMixin):
    """Persist state as a JSON document, for runners without native step state."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def set_state(self, name: str, value: str) -> None:
        payload = self._load()
        payload["state"][name] = value
        write_json_atomic(
            path=self._path,
            payload=payload,
            temp_prefix=STATE_TEMP_PREFIX,
            temp_suffix=STATE_TEMP_SUFFIX,
        )

    def get_state(self, name: str) -> str:
        return self._load()["state"].get(name, "")

    def clear(self) -> None:
        """Discard all state at the end of a job."""
        self._path.unlink(missing_ok=True)

    def _load(self) -> StatePayload:
        if not self._path.is_file():
            return _new_state()
        try:
            raw = load_json_file(self._path)
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable state file %s", self._path)
            return _new_state()
        if not isinstance(raw, dict) or raw.get("version") != STATE_FILE_VERSION:
            return _new_state()
        values = raw.get("state")
        if not isinstance(values, dict):
            return _new_state()
        return {
            "version": STATE_FILE_VERSION,
            "state": {key: value for key, value in values.items() if isinstance(key, str) and isinstance(value, str)},
        }


def _new_state() -> StatePayload:
    return {"version": STATE_FILE_VERSION, "state": {}}

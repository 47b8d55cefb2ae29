"""Binding to the hosted CI runner: step outputs, failure status and event metadata."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

from storesnap.constants.actions import (
    DEFAULT_SERVER_URL,
    ENV_EVENT_NAME,
    ENV_OUTPUT_FILE,
    ENV_REF,
    ENV_SERVER_URL,
    HOSTED_SERVER_HOSTNAME,
)

logger = logging.getLogger(__name__)


class Environment(Protocol):
    """Port for the side effects a phase has on its CI job."""

    platform: str

    def set_output(self, name: str, value: str) -> None: ...

    def set_failed(self, message: str) -> None: ...

    def is_valid_event(self) -> bool: ...

    def event_name(self) -> str: ...

    def is_ghes(self) -> bool: ...


class ActionsEnvironment:
    """Environment backed by runner variables and the ``GITHUB_OUTPUT`` file."""

    def __init__(self, environ: Mapping[str, str] | None = None, *, platform: str | None = None) -> None:
        self._environ = environ if environ is not None else os.environ
        self.platform = platform if platform is not None else sys.platform
        self.outputs: dict[str, str] = {}
        self.failures: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        output_file = self._environ.get(ENV_OUTPUT_FILE, "")
        if not output_file:
            logger.info("Output %s=%s", name, value)
            return
        with Path(output_file).open("a", encoding="utf-8") as handle:
            handle.write(f"{name}={value}\n")

    def set_failed(self, message: str) -> None:
        self.failures.append(message)
        logger.error(message)

    def is_valid_event(self) -> bool:
        """Cache access is scoped to a ref, so events without one cannot use it."""
        return bool(self._environ.get(ENV_REF))

    def event_name(self) -> str:
        return self._environ.get(ENV_EVENT_NAME, "")

    def is_ghes(self) -> bool:
        server_url = self._environ.get(ENV_SERVER_URL) or DEFAULT_SERVER_URL
        hostname = urlparse(server_url).hostname or ""
        return hostname.upper() != HOSTED_SERVER_HOSTNAME

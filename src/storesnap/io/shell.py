"""Child-process execution with captured, logged output."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from storesnap.exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one child process."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """Port for running store CLI commands."""

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        stderr_log: Path | None = None,
    ) -> CommandResult: ...


class ShellExecutor:
    """Run commands in a child process and surface non-zero exits as ``CommandError``."""

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._env = dict(env) if env is not None else None
        self._cwd = cwd
        self._timeout_seconds = timeout_seconds

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        stderr_log: Path | None = None,
    ) -> CommandResult:
        """Run *argv*, log its output and return the captured result.

        When *stderr_log* is given, captured stderr is appended to that file so
        that noisy tools (``nix copy`` prints progress on stderr) can be shown
        on demand instead of inline.
        """
        command = tuple(str(arg) for arg in argv)
        logger.info("$ %s", shlex.join(command))
        try:
            completed = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                env=self._env,
                cwd=self._cwd,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise CommandError(command, 127, "", str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandError(command, -1, "", f"timed out after {exc.timeout} seconds") from exc

        result = CommandResult(
            argv=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if result.stdout.strip():
            logger.info(result.stdout.rstrip())
        if result.stderr.strip():
            if stderr_log is not None:
                stderr_log.parent.mkdir(parents=True, exist_ok=True)
                with stderr_log.open("a", encoding="utf-8") as handle:
                    handle.write(result.stderr)
            elif not result.ok:
                logger.error(result.stderr.rstrip())
            else:
                logger.debug(result.stderr.rstrip())

        if check and not result.ok:
            raise CommandError(command, result.returncode, result.stdout, result.stderr)
        return result

"""Child-process exceptions."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from storesnap.exceptions.base import StoreSnapError


class CommandError(StoreSnapError):
    """Raised when a child process exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stdout: str = "", stderr: str = "") -> None:
        self.argv = tuple(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no error output"
        super().__init__(f"Command `{shlex.join(self.argv)}` exited with status {returncode}: {detail}")

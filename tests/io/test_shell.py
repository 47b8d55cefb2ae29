"""Tests for child-process execution."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from storesnap.exceptions import CommandError
from storesnap.io import ShellExecutor


def test_run_captures_output(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    result = ShellExecutor().run([sys.executable, "-c", "print('hello')"])

    assert result.ok
    assert result.stdout == "hello\n"
    assert "hello" in caplog.text


def test_nonzero_exit_raises_with_last_stderr_line() -> None:
    script = "import sys; sys.stderr.write('warming up\\nerror: path is not valid\\n'); sys.exit(3)"

    with pytest.raises(CommandError) as excinfo:
        ShellExecutor().run([sys.executable, "-c", script])

    assert excinfo.value.returncode == 3
    assert "exited with status 3" in str(excinfo.value)
    assert "error: path is not valid" in str(excinfo.value)


def test_unchecked_failure_returns_result() -> None:
    result = ShellExecutor().run([sys.executable, "-c", "import sys; sys.exit(1)"], check=False)

    assert not result.ok
    assert result.returncode == 1


def test_stderr_is_appended_to_log_file(tmp_path: Path) -> None:
    log = tmp_path / "logs"
    log.write_text("earlier\n", encoding="utf-8")
    script = "import sys; sys.stderr.write('copying path\\n')"

    ShellExecutor().run([sys.executable, "-c", script], stderr_log=log)

    assert log.read_text(encoding="utf-8") == "earlier\ncopying path\n"


def test_missing_program_raises_command_error(tmp_path: Path) -> None:
    with pytest.raises(CommandError) as excinfo:
        ShellExecutor().run([str(tmp_path / "no-such-nix"), "copy"])

    assert excinfo.value.returncode == 127

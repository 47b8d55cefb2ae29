"""Tests for the CLI parser and entrypoint."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

import pytest

from storesnap.cli import handlers
from storesnap.cli.main import build_parser, main
from storesnap.store import record_marker


@pytest.fixture()
def runner_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Point every runner variable at tmp_path and isolate from any real environment."""
    for name in list(os.environ):
        if name.startswith(("INPUT_", "STATE_", "GITHUB_")):
            monkeypatch.delenv(name, raising=False)
    paths = {
        "cache_dir": tmp_path / "remote",
        "cache_root": tmp_path / "work",
        "output": tmp_path / "output",
        "state": tmp_path / "state.json",
    }
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    monkeypatch.setenv("GITHUB_OUTPUT", str(paths["output"]))
    monkeypatch.setenv("INPUT_CACHE-ROOT", str(paths["cache_root"]))
    return paths


def test_build_parser_accepts_phase_flags(tmp_path: Path) -> None:
    args = build_parser().parse_args(
        ["restore", "--config", str(tmp_path / "c.yaml"), "--cache-dir", str(tmp_path), "-s", "state.json", "-v"]
    )

    assert args.command == "restore"
    assert args.config == tmp_path / "c.yaml"
    assert args.cache_dir == tmp_path
    assert args.state_file == Path("state.json")
    assert args.verbose is True


def test_build_parser_scan_defaults(tmp_path: Path) -> None:
    args = build_parser().parse_args(["scan", "--marker", str(tmp_path / "time")])

    assert args.root == Path("/")
    assert args.max_depth == 100
    assert args.entry_depth == 3
    assert args.before is False


def test_build_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_missing_key_fails_restore(runner_env: dict[str, Path]) -> None:
    assert main(["restore", "--cache-dir", str(runner_env["cache_dir"])]) == 1


def test_missing_cache_dir_is_a_configuration_error(
    runner_env: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["restore"]) == 2
    assert "Configuration error: No remote cache configured" in capsys.readouterr().err


def test_bad_config_file_is_a_configuration_error(
    runner_env: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "storesnap.yaml"
    config.write_text("not-an-input: 1\n", encoding="utf-8")

    assert main(["save"]) == 2
    assert "Unknown input 'not-an-input'" in capsys.readouterr().err


def test_restore_miss_then_save_round_trip(
    runner_env: dict[str, Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[list[str]] = []

    class RecordingExecutor(handlers.ShellExecutor):
        def run(self, argv, *, check=True, stderr_log=None):
            calls.append(list(argv))
            return super().run(["true"], check=check, stderr_log=stderr_log)

    monkeypatch.setattr(handlers, "ShellExecutor", RecordingExecutor)
    monkeypatch.setenv("INPUT_KEY", "linux-deps-v1")
    (tmp_path / "storesnap.yaml").write_text(f"cache-dir: {runner_env['cache_dir']}\n", encoding="utf-8")
    state_args = ["--state-file", str(runner_env["state"])]

    assert main(["restore", *state_args]) == 0
    assert runner_env["output"].read_text(encoding="utf-8") == "cache-hit=false\n"
    assert json.loads(runner_env["state"].read_text(encoding="utf-8"))["state"] == {"CACHE_KEY": "linux-deps-v1"}

    assert main(["save", *state_args]) == 0
    assert calls == [["nix", "copy", "--no-check-sigs", "--all", "--to", str(runner_env["cache_root"] / "dump")]]
    index = json.loads((runner_env["cache_dir"] / "index.json").read_text(encoding="utf-8"))
    assert list(index["entries"]) == ["linux-deps-v1"]


def test_save_installs_thread_exception_downgrade(
    runner_env: dict[str, Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)

    assert main(["save", "--cache-dir", str(runner_env["cache_dir"])]) == 0
    assert threading.excepthook is handlers.warn_on_thread_exception


def test_scan_prints_working_set(
    tmp_path: Path, marker_time: float, store_path, capsys: pytest.CaptureFixture[str]
) -> None:
    marker = tmp_path / "time"
    record_marker(marker, now=marker_time)
    store_path(tmp_path, "abc-hello/bin", accessed=marker_time + 5)
    store_path(tmp_path, "def-old", accessed=marker_time - 5)
    os.utime(tmp_path / "nix" / "store" / "abc-hello", (marker_time + 5, marker_time + 5))

    assert main(["scan", "--marker", str(marker), "--root", str(tmp_path), "--max-depth", "1"]) == 0
    assert capsys.readouterr().out == "/nix/store/abc-hello\n"

    assert main(["scan", "--marker", str(marker), "--root", str(tmp_path), "--max-depth", "1", "--before"]) == 0
    assert capsys.readouterr().out == "/nix/store/def-old\n"


def test_scan_missing_marker_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", "--marker", str(tmp_path / "absent"), "--root", str(tmp_path)]) == 1
    assert "Scan error" in capsys.readouterr().err

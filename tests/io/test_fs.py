"""Tests for filesystem helpers."""

from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest

from storesnap.io import (
    clear_directory,
    clear_path,
    format_size,
    load_json_file,
    tree_size,
    write_json_atomic,
)


def _read_only_tree(root: Path) -> Path:
    package = root / "abc-hello"
    (package / "bin").mkdir(parents=True)
    (package / "bin" / "hello").write_text("#!/bin/sh\n", encoding="utf-8")
    for path in (package / "bin" / "hello", package / "bin", package):
        path.chmod(stat.S_IRUSR | stat.S_IXUSR)
    return package


def test_clear_path_removes_read_only_store_tree(tmp_path: Path) -> None:
    package = _read_only_tree(tmp_path)

    clear_path(package)

    assert not package.exists()


def test_clear_path_removes_dangling_symlink(tmp_path: Path) -> None:
    link = tmp_path / "link"
    link.symlink_to(tmp_path / "missing")

    clear_path(link)
    clear_path(link)

    assert not link.is_symlink()


def test_clear_directory_keeps_directory(tmp_path: Path) -> None:
    target = tmp_path / "dump"
    target.mkdir()
    _read_only_tree(target)
    (target / "file").write_text("x", encoding="utf-8")

    assert clear_directory(target) == 2
    assert target.is_dir()
    assert list(target.iterdir()) == []
    assert clear_directory(tmp_path / "missing") == 0


def test_tree_size_counts_files(tmp_path: Path) -> None:
    (tmp_path / "a").write_bytes(b"12345")

    assert tree_size(tmp_path / "a") == 5
    assert tree_size(tmp_path) >= 5


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0B"), (512, "512B"), (1536, "1.5K"), (5 * 1024 * 1024, "5.0M"), (3 * 1024**3, "3.0G")],
)
def test_format_size(size: int, expected: str) -> None:
    assert format_size(size) == expected


def test_write_json_atomic_cleans_temp_file_on_error(tmp_path: Path) -> None:
    out_path = tmp_path / "state.json"

    with pytest.raises(TypeError):
        write_json_atomic(path=out_path, payload={"bad": object()}, temp_prefix=".tmp-", temp_suffix=".json")

    assert not [item for item in tmp_path.iterdir() if item.name.startswith(".tmp-")]
    assert not out_path.exists()


def test_write_json_atomic_round_trip(tmp_path: Path) -> None:
    out_path = tmp_path / "nested" / "state.json"

    write_json_atomic(path=out_path, payload={"version": 1}, temp_prefix=".tmp-", temp_suffix=".json")

    assert load_json_file(out_path) == {"version": 1}
    assert json.loads(out_path.read_text(encoding="utf-8")) == {"version": 1}

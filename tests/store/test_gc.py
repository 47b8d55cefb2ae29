"""Tests for GC-root pinning around garbage collection."""

from __future__ import annotations

from pathlib import Path

import pytest

from storesnap.exceptions import CommandError, GCRootError
from storesnap.store import GCRootGuard, root_link_name


def test_pin_creates_one_root_link_per_entry(tmp_path: Path, executor) -> None:
    guard_dir = tmp_path / "gcroots" / "storesnap-working-set"
    guard = GCRootGuard(executor, guard_dir)

    roots = guard.pin({"/nix/store/a-one", "/nix/store/b-two"})

    assert roots.directory == guard_dir
    assert sorted(link.name for link in guard_dir.iterdir()) == ["a-one", "b-two"]
    assert (guard_dir / "a-one").readlink() == Path("/nix/store/a-one")
    assert guard.active is roots


def test_pin_replaces_stale_guard_directory(tmp_path: Path, executor) -> None:
    guard_dir = tmp_path / "guard"
    guard_dir.mkdir()
    (guard_dir / "stale").write_text("left over", encoding="utf-8")

    GCRootGuard(executor, guard_dir).pin({"/nix/store/a-one"})

    assert [link.name for link in guard_dir.iterdir()] == ["a-one"]


def test_reconcile_collects_inside_pin_window_and_releases(tmp_path: Path, executor) -> None:
    guard_dir = tmp_path / "guard"
    guard = GCRootGuard(executor, guard_dir)

    guard.reconcile({"/nix/store/a-one"})

    assert executor.calls == [("nix", "store", "gc")]
    assert not guard_dir.exists()
    assert guard.active is None


def test_pinned_releases_roots_when_block_raises(tmp_path: Path, executor) -> None:
    guard_dir = tmp_path / "guard"
    guard = GCRootGuard(executor, guard_dir)

    with pytest.raises(RuntimeError, match="boom"):
        with guard.pinned({"/nix/store/a-one"}):
            assert guard_dir.is_dir()
            raise RuntimeError("boom")

    assert not guard_dir.exists()
    assert guard.active is None


def test_pinned_releases_roots_when_collection_fails(tmp_path: Path, make_executor) -> None:
    guard_dir = tmp_path / "guard"
    guard = GCRootGuard(make_executor(failing=["gc"]), guard_dir)

    with pytest.raises(CommandError):
        guard.reconcile({"/nix/store/a-one"})

    assert not guard_dir.exists()


def test_collect_garbage_outside_pin_window_is_rejected(tmp_path: Path, executor) -> None:
    guard = GCRootGuard(executor, tmp_path / "guard")

    with pytest.raises(GCRootError):
        guard.collect_garbage()

    assert executor.calls == []


def test_nested_pin_is_rejected(tmp_path: Path, executor) -> None:
    guard = GCRootGuard(executor, tmp_path / "guard")

    with guard.pinned({"/nix/store/a-one"}):
        with pytest.raises(GCRootError):
            guard.pin({"/nix/store/b-two"})


def test_pin_deeper_identifiers_sharing_last_segment(tmp_path: Path, executor) -> None:
    guard_dir = tmp_path / "guard"

    roots = GCRootGuard(executor, guard_dir).pin({"/nix/store/aaa-one/bin", "/nix/store/bbb-two/bin"})

    assert sorted(link.name for link in roots.links) == ["aaa-one-bin", "bbb-two-bin"]
    assert (guard_dir / "aaa-one-bin").readlink() == Path("/nix/store/aaa-one/bin")
    assert (guard_dir / "bbb-two-bin").readlink() == Path("/nix/store/bbb-two/bin")


def test_root_link_name() -> None:
    assert root_link_name("/nix/store/abc-hello") == "abc-hello"
    assert root_link_name("/nix/store/abc-hello/share/man") == "abc-hello-share-man"
    with pytest.raises(GCRootError):
        root_link_name("/nix/store")

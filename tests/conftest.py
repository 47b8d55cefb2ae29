"""Shared pytest fixtures: fake runner bindings and a throwaway store layout."""

from __future__ import annotations

import os
import time
from collections.abc import Sequence
from pathlib import Path

import pytest

from storesnap.config import MappingInputSource, SnapshotSettings
from storesnap.exceptions import CommandError
from storesnap.io import CommandResult


class FakeExecutor:
    """Record argv instead of running it; fail any command whose last argument is listed."""

    def __init__(self, failing: Sequence[str] = ()) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.failing = set(failing)

    def run(self, argv: Sequence[str], *, check: bool = True, stderr_log: Path | None = None) -> CommandResult:
        command = tuple(str(arg) for arg in argv)
        self.calls.append(command)
        if command[-1] in self.failing:
            if stderr_log is not None:
                with stderr_log.open("a", encoding="utf-8") as handle:
                    handle.write(f"error: cannot copy {command[-1]}\n")
            result = CommandResult(argv=command, returncode=1, stderr="error: copy failed\n")
            if check:
                raise CommandError(command, 1, "", result.stderr)
            return result
        return CommandResult(argv=command, returncode=0)


class FakeCacheClient:
    """In-memory remote cache keyed by exact key."""

    def __init__(self, entries: dict[str, int] | None = None, *, available: bool = True) -> None:
        self.entries = dict(entries or {})
        self.available = available
        self.restore_calls: list[tuple[str, tuple[str, ...]]] = []
        self.save_calls: list[str] = []

    def is_feature_available(self) -> bool:
        return self.available

    def restore_cache(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
        *,
        lookup_only: bool = False,
        enable_cross_os_archive: bool = False,
    ) -> str | None:
        self.restore_calls.append((primary_key, tuple(restore_keys)))
        for key in (primary_key, *restore_keys):
            if key in self.entries:
                return key
            prefixed = sorted(candidate for candidate in self.entries if candidate.startswith(key))
            if prefixed:
                return prefixed[-1]
        return None

    def save_cache(
        self,
        paths: Sequence[str],
        key: str,
        *,
        upload_chunk_size: int | None = None,
        enable_cross_os_archive: bool = False,
    ) -> int:
        self.save_calls.append(key)
        cache_id = len(self.entries)
        self.entries[key] = cache_id
        return cache_id


class DictStateProvider:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})

    def set_state(self, name: str, value: str) -> None:
        self.values[name] = value

    def get_state(self, name: str) -> str:
        return self.values.get(name, "")

    def get_cache_state(self) -> str | None:
        return self.values.get("CACHE_RESULT") or None


class FakeEnvironment:
    def __init__(self, *, valid_event: bool = True, ghes: bool = False, platform: str = "linux") -> None:
        self.platform = platform
        self.valid_event = valid_event
        self.ghes = ghes
        self.outputs: dict[str, str] = {}
        self.failures: list[str] = []

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value

    def set_failed(self, message: str) -> None:
        self.failures.append(message)

    def is_valid_event(self) -> bool:
        return self.valid_event

    def event_name(self) -> str:
        return "push" if self.valid_event else "schedule"

    def is_ghes(self) -> bool:
        return self.ghes


def touch_store_path(prefix: Path, relative: str, *, accessed: float, is_dir: bool = False) -> Path:
    """Create ``<prefix>/nix/store/<relative>`` with the given access time."""
    path = prefix / "nix" / "store" / relative
    if is_dir:
        path.mkdir(parents=True, exist_ok=True)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")
    os.utime(path, (accessed, accessed))
    return path


@pytest.fixture()
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def environment() -> FakeEnvironment:
    return FakeEnvironment()


@pytest.fixture()
def state() -> DictStateProvider:
    return DictStateProvider()


@pytest.fixture()
def marker_time() -> float:
    """A marker timestamp safely in the past so real access times never race it."""
    return time.time() - 3600


@pytest.fixture()
def settings(tmp_path: Path) -> SnapshotSettings:
    """Settings rooted entirely under tmp_path."""
    return SnapshotSettings(
        platform="linux",
        cache_root=tmp_path / "work",
        store_prefix=tmp_path / "live",
        gc_roots_dir=tmp_path / "gcroots",
    )


@pytest.fixture()
def inputs() -> MappingInputSource:
    return MappingInputSource({"key": "linux-deps-v1", "restore-keys": "linux-deps-\nlinux-"})


@pytest.fixture()
def make_executor() -> type[FakeExecutor]:
    return FakeExecutor


@pytest.fixture()
def make_client() -> type[FakeCacheClient]:
    return FakeCacheClient


@pytest.fixture()
def make_environment() -> type[FakeEnvironment]:
    return FakeEnvironment


@pytest.fixture()
def make_state() -> type[DictStateProvider]:
    return DictStateProvider


@pytest.fixture()
def store_path():
    """Return a helper creating store paths with a chosen access time."""
    return touch_store_path

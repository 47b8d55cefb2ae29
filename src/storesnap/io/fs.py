"""Filesystem helpers for read-only store trees."""

from __future__ import annotations

import errno
import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path


def _make_writable_and_retry(func: Callable[[str], object], path: str, exc: BaseException) -> None:
    """onexc handler for rmtree: store trees are read-only, so open up parents and retry."""
    parent = os.path.dirname(path)
    if parent:
        try:
            parent_mode = os.lstat(parent).st_mode
            if not parent_mode & stat.S_IWUSR:
                os.chmod(parent, parent_mode | stat.S_IWUSR)
        except OSError:
            pass

    try:
        mode = os.lstat(path).st_mode
        if stat.S_ISDIR(mode) and not mode & stat.S_IWUSR:
            os.chmod(path, mode | stat.S_IWUSR)
    except OSError as chmod_exc:
        if chmod_exc.errno not in (errno.ENOENT, errno.EPERM):
            raise exc from chmod_exc

    func(path)


def clear_path(path: Path) -> None:
    """Remove a file, symlink or directory tree at *path* if it exists."""
    if not path.exists() and not path.is_symlink():
        return
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, onexc=_make_writable_and_retry)
        return
    try:
        path.unlink()
    except PermissionError:
        parent_mode = path.parent.stat().st_mode
        os.chmod(path.parent, parent_mode | stat.S_IWUSR)
        path.unlink()


def clear_directory(path: Path) -> int:
    """Remove everything inside *path*, keeping the directory itself.

    Returns the number of top-level children removed.
    """
    if not path.is_dir():
        return 0
    removed = 0
    for child in sorted(path.iterdir()):
        clear_path(child)
        removed += 1
    return removed


def tree_size(path: Path) -> int:
    """Return the apparent size in bytes of a file or directory tree, without following symlinks."""
    info = path.lstat()
    if not stat.S_ISDIR(info.st_mode):
        return info.st_size
    total = info.st_size
    for dirpath, dirnames, filenames in os.walk(path):
        for name in (*dirnames, *filenames):
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except FileNotFoundError:
                continue
    return total


def format_size(size: int) -> str:
    """Render a byte count the way ``du -h`` does."""
    if size < 1024:
        return f"{size}B"
    value = float(size)
    unit = "B"
    for unit in ("K", "M", "G", "T"):
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f}{unit}"

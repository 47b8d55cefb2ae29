"""Shared file and process I/O helpers."""

from .fs import clear_directory, clear_path, format_size, tree_size
from .json_io import load_json_file, write_json_atomic, write_text_atomic
from .shell import CommandExecutor, CommandResult, ShellExecutor

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "ShellExecutor",
    "clear_directory",
    "clear_path",
    "format_size",
    "load_json_file",
    "tree_size",
    "write_json_atomic",
    "write_text_atomic",
]

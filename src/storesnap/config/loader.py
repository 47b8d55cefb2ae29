"""Input loading and normalization into ``SnapshotSettings``."""

from __future__ import annotations

import difflib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from storesnap.config.inputs import (
    get_input,
    get_input_as_array,
    get_input_as_bool,
    get_input_as_int,
    get_platform_input_as_bool,
)
from storesnap.config.model import SnapshotSettings
from storesnap.config.sources import ChainedInputSource, EnvInputSource, InputSource, MappingInputSource
from storesnap.constants.inputs import (
    ALL_INPUTS,
    CONFIG_FILENAME,
    INPUT_CACHE_DIR,
    INPUT_CACHE_ROOT,
    INPUT_CHECK_SIGNATURES,
    INPUT_COLLECT_GARBAGE,
    INPUT_ENABLE_CROSS_OS_ARCHIVE,
    INPUT_FAIL_ON_CACHE_MISS,
    INPUT_LINUX_CACHE_WORKING_SET,
    INPUT_LINUX_DEBUG_ENABLED,
    INPUT_LINUX_KEEP_CACHE,
    INPUT_LOOKUP_ONLY,
    INPUT_MACOS_CACHE_WORKING_SET,
    INPUT_MACOS_DEBUG_ENABLED,
    INPUT_MACOS_KEEP_CACHE,
    INPUT_PATH,
    INPUT_STORE_ENTRY_DEPTH,
    INPUT_UPLOAD_CHUNK_SIZE,
)
from storesnap.constants.store import DEFAULT_STORE_ENTRY_DEPTH, MIN_STORE_ENTRY_DEPTH
from storesnap.exceptions import ConfigError
from storesnap.store.layout import default_cache_root


def load_input_file(path: Path) -> MappingInputSource:
    """Load inputs from a YAML mapping of input name to value."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file at {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    values: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or key not in ALL_INPUTS:
            raise ConfigError(f"Unknown input {key!r} in {path}{_suggestion(key)}")
        values[key] = _render_value(value, key)
    return MappingInputSource(values)


def build_input_source(
    *,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    root: Path | None = None,
) -> InputSource:
    """Combine runner inputs with an optional ``storesnap.yaml``; runner inputs win."""
    env_source = EnvInputSource(environ)
    if config_path is not None:
        resolved = config_path.resolve()
        if not resolved.is_file():
            raise ConfigError(f"Config file not found: {resolved}")
        return ChainedInputSource(env_source, load_input_file(resolved))

    default_path = (root or Path.cwd()) / CONFIG_FILENAME
    if default_path.is_file():
        return ChainedInputSource(env_source, load_input_file(default_path))
    return env_source


def load_settings(source: InputSource, *, platform: str) -> SnapshotSettings:
    """Resolve every input except the cache keys into a ``SnapshotSettings``."""
    cache_root_raw = get_input(source, INPUT_CACHE_ROOT)
    cache_dir_raw = get_input(source, INPUT_CACHE_DIR)

    depth_raw = get_input(source, INPUT_STORE_ENTRY_DEPTH)
    store_entry_depth = DEFAULT_STORE_ENTRY_DEPTH
    if depth_raw:
        if not depth_raw.isdigit() or int(depth_raw) < MIN_STORE_ENTRY_DEPTH:
            raise ConfigError(
                f"{INPUT_STORE_ENTRY_DEPTH} must be an integer >= {MIN_STORE_ENTRY_DEPTH}, got {depth_raw!r}"
            )
        store_entry_depth = int(depth_raw)

    return SnapshotSettings(
        platform=platform,
        cache_paths=tuple(get_input_as_array(source, INPUT_PATH)),
        enable_cross_os_archive=get_input_as_bool(source, INPUT_ENABLE_CROSS_OS_ARCHIVE),
        fail_on_cache_miss=get_input_as_bool(source, INPUT_FAIL_ON_CACHE_MISS),
        lookup_only=get_input_as_bool(source, INPUT_LOOKUP_ONLY),
        upload_chunk_size=get_input_as_int(source, INPUT_UPLOAD_CHUNK_SIZE),
        keep_cache=get_platform_input_as_bool(
            source, INPUT_LINUX_KEEP_CACHE, INPUT_MACOS_KEEP_CACHE, platform=platform
        ),
        debug_enabled=get_platform_input_as_bool(
            source, INPUT_LINUX_DEBUG_ENABLED, INPUT_MACOS_DEBUG_ENABLED, platform=platform
        ),
        cache_working_set=get_platform_input_as_bool(
            source, INPUT_LINUX_CACHE_WORKING_SET, INPUT_MACOS_CACHE_WORKING_SET, platform=platform
        ),
        check_signatures=get_input_as_bool(source, INPUT_CHECK_SIGNATURES),
        collect_garbage=get_input_as_bool(source, INPUT_COLLECT_GARBAGE),
        cache_root=Path(cache_root_raw).expanduser() if cache_root_raw else default_cache_root(platform),
        cache_dir=Path(cache_dir_raw).expanduser() if cache_dir_raw else None,
        store_entry_depth=store_entry_depth,
    )


def _render_value(value: Any, key: str) -> str:
    """Render a YAML value the way the runner would pass it: as a string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return "\n".join(value)
    raise ConfigError(f"{key} must be a string, boolean, integer or list of strings")


def _suggestion(key: object) -> str:
    if not isinstance(key, str):
        return ""
    matches = difflib.get_close_matches(key, sorted(ALL_INPUTS), n=1)
    return f" (did you mean {matches[0]!r}?)" if matches else ""

"""CLI subcommand handlers and runtime wiring."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass

from storesnap.config import InputSource, SnapshotSettings, build_input_source, load_settings
from storesnap.exceptions import ConfigError
from storesnap.io import CommandExecutor, ShellExecutor
from storesnap.phases.restore import restore_snapshot
from storesnap.phases.save import save_snapshot
from storesnap.remote import DirectoryCacheClient, RemoteCacheClient
from storesnap.runner import ActionsEnvironment, ActionsStateProvider, FileStateProvider, StateProvider
from storesnap.store import reduce_to_working_set, scan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Runtime:
    """Collaborators for one phase invocation."""

    inputs: InputSource
    settings: SnapshotSettings
    client: RemoteCacheClient
    state: StateProvider
    environment: ActionsEnvironment
    executor: CommandExecutor


def build_runtime(args: argparse.Namespace, environ: Mapping[str, str] | None = None) -> Runtime:
    """Resolve inputs and wire the concrete runner, cache and executor bindings."""
    environ = environ if environ is not None else os.environ
    inputs = build_input_source(config_path=args.config, environ=environ)
    environment = ActionsEnvironment(environ)
    settings = load_settings(inputs, platform=environment.platform)

    cache_dir = args.cache_dir or settings.cache_dir
    if cache_dir is None:
        raise ConfigError("No remote cache configured: pass --cache-dir or set the cache-dir input")

    state: StateProvider = FileStateProvider(args.state_file) if args.state_file else ActionsStateProvider(environ)
    return Runtime(
        inputs=inputs,
        settings=settings,
        client=DirectoryCacheClient(cache_dir, platform=environment.platform),
        state=state,
        environment=environment,
        executor=ShellExecutor(),
    )


def handle_restore(runtime: Runtime) -> int:
    """Run the restore phase; exit 1 when it failed the job."""
    restore_snapshot(
        inputs=runtime.inputs,
        settings=runtime.settings,
        client=runtime.client,
        state=runtime.state,
        environment=runtime.environment,
        executor=runtime.executor,
    )
    return 1 if runtime.environment.failed else 0


def handle_save(runtime: Runtime) -> int:
    """Run the save phase; a failed save never fails the job."""
    threading.excepthook = warn_on_thread_exception
    save_snapshot(
        inputs=runtime.inputs,
        settings=runtime.settings,
        client=runtime.client,
        state=runtime.state,
        environment=runtime.environment,
        executor=runtime.executor,
    )
    return 0


def handle_scan(args: argparse.Namespace) -> int:
    """Print the working set (or raw records) relative to a time marker."""
    try:
        records = scan(args.marker, args.max_depth, not args.before, root=args.root)
    except OSError as exc:
        print(f"Scan error: {exc}", file=sys.stderr)
        return 1

    if args.records:
        for record in records:
            print(record.format())
        return 0

    for identifier in sorted(reduce_to_working_set(records, root=args.root, depth=args.entry_depth)):
        print(identifier)
    return 0


def warn_on_thread_exception(args: threading.ExceptHookArgs) -> None:
    """Downgrade exceptions escaping background threads (e.g. an in-flight upload) to warnings."""
    logger.warning("%s", args.exc_value if args.exc_value is not None else args.exc_type.__name__)

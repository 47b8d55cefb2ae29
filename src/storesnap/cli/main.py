"""CLI entrypoint for storesnap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from storesnap import __version__
from storesnap.cli.handlers import build_runtime, handle_restore, handle_save, handle_scan
from storesnap.constants.branding import BRAND_NAME, CLI_DESCRIPTION
from storesnap.constants.layout import LIVE_STORE_PREFIX
from storesnap.constants.store import DEFAULT_STORE_ENTRY_DEPTH, SAVE_SCAN_MAX_DEPTH
from storesnap.exceptions import ConfigError
from storesnap.reporting import set_color


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog=BRAND_NAME,
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    phase_options = argparse.ArgumentParser(add_help=False)
    phase_options.add_argument("-c", "--config", type=Path, default=None, help="Inputs file (storesnap.yaml)")
    phase_options.add_argument(
        "-d",
        "--cache-dir",
        type=Path,
        default=None,
        help="Directory holding cache archives (overrides the cache-dir input)",
    )
    phase_options.add_argument(
        "-s",
        "--state-file",
        type=Path,
        default=None,
        help="JSON file carrying state from restore to save (default: runner step state)",
    )
    phase_options.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    phase_options.add_argument("--no-color", action="store_true", help="Disable colored step frames")

    subparsers.add_parser(
        "restore",
        parents=[phase_options],
        help="Restore the store snapshot at job start",
    )
    subparsers.add_parser(
        "save",
        parents=[phase_options],
        help="Save the job's working set at job end",
    )

    scan = subparsers.add_parser("scan", help="Print store entries accessed relative to a time marker")
    scan.add_argument("-m", "--marker", type=Path, required=True, help="Time marker file")
    scan.add_argument(
        "-r",
        "--root",
        type=Path,
        default=LIVE_STORE_PREFIX,
        help="Prefix holding nix/store (default: /)",
    )
    scan.add_argument("--max-depth", type=int, default=SAVE_SCAN_MAX_DEPTH, help="Levels below nix/store to walk")
    scan.add_argument(
        "--entry-depth",
        type=int,
        default=DEFAULT_STORE_ENTRY_DEPTH,
        help="Path segments kept when reducing a path to a store entry",
    )
    scan.add_argument("--before", action="store_true", help="List entries not accessed since the marker")
    scan.add_argument("--records", action="store_true", help="Print raw access-time records instead of entries")
    scan.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )
    set_color(not getattr(args, "no_color", True) and sys.stderr.isatty())

    if args.command == "scan":
        return handle_scan(args)

    try:
        runtime = build_runtime(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.command == "restore":
        return handle_restore(runtime)
    if args.command == "save":
        return handle_save(runtime)

    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())

"""Checks and diagnostics shared by the restore and save phases."""

from __future__ import annotations

import logging
from pathlib import Path

from storesnap.constants.actions import BACKEND_UNAVAILABLE_MESSAGE, GHES_UNAVAILABLE_MESSAGE
from storesnap.constants.store import ACCESS_TIME_COLUMNS
from storesnap.remote import RemoteCacheClient
from storesnap.reporting import log_block_debug
from storesnap.runner import Environment
from storesnap.store import scan
from storesnap.types import ScanDirection

logger = logging.getLogger(__name__)


def is_cache_feature_available(client: RemoteCacheClient, environment: Environment) -> bool:
    if client.is_feature_available():
        return True
    if environment.is_ghes():
        logger.warning(GHES_UNAVAILABLE_MESSAGE)
    else:
        logger.warning(BACKEND_UNAVAILABLE_MESSAGE)
    return False


def warn_invalid_event(environment: Environment) -> None:
    logger.warning(
        "Event Validation Error: The event type %s is not supported because it's not tied to a branch or tag ref.",
        environment.event_name() or "<unknown>",
    )


def print_paths(marker: Path, max_depth: int, newer: bool, *, root: Path) -> None:
    """Log store paths with their access times on one side of *marker*."""
    direction: ScanDirection = "after" if newer else "before"
    with log_block_debug(f'Printing paths accessed {direction} accessing "{marker}".'):
        logger.info(ACCESS_TIME_COLUMNS)
        for record in scan(marker, max_depth, newer, root=root):
            logger.info(record.format())


def print_paths_all(marker: Path, max_depth: int, *, root: Path) -> None:
    print_paths(marker, max_depth, False, root=root)
    print_paths(marker, max_depth, True, root=root)

"""Tests for framed log blocks."""

from __future__ import annotations

import logging

import pytest

from storesnap.reporting import finish_message, framed, log_block, log_lines, set_color, start_message


def test_block_frames_successful_step(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    with log_block("Removing existing cache."):
        logging.getLogger("storesnap").info("inside")

    assert [record.getMessage() for record in caplog.records] == [
        "\n\n[START] Removing existing cache.\n\n",
        "inside",
        "\n\n[FINISH] Removing existing cache.\n\n",
    ]


def test_block_omits_finish_frame_on_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    with pytest.raises(OSError):
        with log_block("Copying all store paths."):
            raise OSError("disk full")

    assert "[START] Copying all store paths." in caplog.text
    assert "[FINISH]" not in caplog.text


def test_message_helpers() -> None:
    assert framed(start_message("x")) == "\n\n[START] x\n\n"
    assert finish_message("x") == "[FINISH] x"


def test_log_lines_skips_blank_lines(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    log_lines("copying path 'a'\n\n  \ncopying path 'b'\n")

    assert [record.getMessage() for record in caplog.records] == ["copying path 'a'", "copying path 'b'"]


def test_frames_are_colored_only_when_enabled() -> None:
    set_color(True)
    try:
        colored = framed(start_message("x"), "\033[35;1m")
    finally:
        set_color(False)

    assert colored == "\n\n\033[35;1m[START] x\033[0m\n\n"
    assert framed(start_message("x"), "\033[35;1m") == "\n\n[START] x\n\n"

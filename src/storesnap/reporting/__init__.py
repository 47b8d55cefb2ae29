"""Log formatting helpers."""

from .blocks import finish_message, framed, log_block, log_block_debug, log_lines, set_color, start_message

__all__ = ["finish_message", "framed", "log_block", "log_block_debug", "log_lines", "set_color", "start_message"]

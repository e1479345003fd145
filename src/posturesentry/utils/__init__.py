"""Utility helpers for posturesentry."""
from __future__ import annotations

from .commands import DEFAULT_TIMEOUT, run_command
from .parsers import (
    BOOLEAN_FALSE,
    BOOLEAN_TRUE,
    extract_int,
    filter_table_lines,
    find_line,
    lines_containing_any,
    nth_token,
    parse_bool_text,
    parse_hex_seconds,
    parse_int,
    parse_key_value_output,
    parse_token_int,
    section_value,
    value_after_colon,
)

__all__ = [
    # Commands
    "DEFAULT_TIMEOUT",
    "run_command",
    # Parsers
    "BOOLEAN_TRUE",
    "BOOLEAN_FALSE",
    "parse_bool_text",
    "parse_key_value_output",
    "filter_table_lines",
    "lines_containing_any",
    "find_line",
    "value_after_colon",
    "parse_hex_seconds",
    "parse_int",
    "nth_token",
    "parse_token_int",
    "extract_int",
    "section_value",
]

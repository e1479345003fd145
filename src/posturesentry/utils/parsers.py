"""Parsers and helpers for interpreting native utility outputs.

All functions are pure. The ``parse_*`` helpers raise ParseError when the
output does not have the expected shape; the others return empty values.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional

from ..core.errors import ParseError

BOOLEAN_TRUE = {"1", "true", "yes", "on", "enabled"}
BOOLEAN_FALSE = {"0", "false", "no", "off", "disabled"}

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def parse_bool_text(value: str | None) -> bool | None:
    """Interpret a boolean-style output such as ``True`` or ``0``."""

    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in BOOLEAN_TRUE:
        return True
    if normalized in BOOLEAN_FALSE:
        return False
    return None


def parse_key_value_output(output: str) -> Mapping[str, str]:
    """Parse simple "Key: Value" outputs."""

    data: dict[str, str] = {}
    pattern = re.compile(r"^\s*([^:]+):\s*(.+)$")
    for line in output.splitlines():
        match = pattern.match(line)
        if match:
            key, value = match.groups()
            data[key.strip()] = value.strip()
    return data


def filter_table_lines(output: str, header: str) -> List[str]:
    """Return trimmed, non-empty lines of a one-column table.

    Lines equal to the column ``header`` (case-insensitive) are dropped, so
    repeated headers are skipped as well.
    """
    header = header.lower()
    lines = (line.strip() for line in output.splitlines())
    return [line for line in lines if line and line.lower() != header]


def lines_containing_any(output: str, fragments: Iterable[str]) -> List[str]:
    """Return trimmed lines containing any fragment, case-insensitively."""
    needles = [fragment.lower() for fragment in fragments]
    matches = []
    for line in output.splitlines():
        lowered = line.lower()
        if any(needle in lowered for needle in needles):
            matches.append(line.strip())
    return matches


def find_line(output: str, labels: Iterable[str]) -> Optional[str]:
    """Return the first line containing one of ``labels``."""
    labels = tuple(labels)
    for line in output.splitlines():
        if any(label in line for label in labels):
            return line
    return None


def value_after_colon(line: str) -> str:
    """Return the trimmed text after the first colon of a line."""
    _, sep, value = line.partition(":")
    if not sep:
        raise ParseError("No ':' delimiter in line", raw=line)
    return value.strip()


def parse_hex_seconds(value: str) -> int:
    """Parse a hexadecimal timeout such as ``0x00000b40`` into an int."""
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not _HEX_DIGITS.fullmatch(text):
        raise ParseError(f"Not an unsigned hexadecimal value: {value!r}", raw=value)
    return int(text, 16)


def parse_int(value: str) -> int:
    """Parse a non-negative decimal integer after trimming whitespace."""
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ParseError(f"Not a non-negative integer: {value!r}", raw=value)
    return int(text)


def nth_token(output: str, index: int) -> str:
    """Return the whitespace-delimited token at ``index``."""
    tokens = output.split()
    if len(tokens) <= index:
        raise ParseError(f"Expected at least {index + 1} tokens", raw=output)
    return tokens[index]


def parse_token_int(output: str, index: int = 1) -> int:
    """Parse the integer at a token position, e.g. ``uint32 300`` -> 300."""
    return parse_int(nth_token(output, index))


def extract_int(pattern: str | re.Pattern[str], output: str) -> int:
    """Return the first capture group of ``pattern`` in ``output`` as an int."""
    match = re.search(pattern, output)
    if not match:
        raise ParseError("Pattern not found in output", raw=output)
    return parse_int(match.group(1))


def section_value(output: str, section: str, key: str) -> str:
    """Return the first value for ``key`` at or after the ``section`` line.

    Suited to indented dumps where a section header is followed by
    ``key value`` lines, such as ``pmset -g custom``.
    """
    lines = output.splitlines()
    start = next((i for i, line in enumerate(lines) if section in line), None)
    if start is None:
        raise ParseError(f"Section {section!r} not found", raw=output)
    for line in lines[start:]:
        if line.strip().startswith(key):
            return nth_token(line, 1)
    raise ParseError(f"Key {key!r} not found after {section!r}", raw=output)

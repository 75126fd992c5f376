"""Symbols and small string helpers shared by the grid components."""

from __future__ import annotations

import os
from typing import Tuple

COMMA = ","
QUOTE = '"'
SPACE = " "
CARRIAGE_RETURN = "\r"
LINE_FEED = "\n"

LINE_ENDINGS: Tuple[str, ...] = ("\r\n", "\n", "\r")


def detect_line_ending(text: str, *, default: str | None = None) -> str:
    """Return the line ending used by ``text``.

    ``\\r\\n`` wins over ``\\n`` which wins over ``\\r``. Text without any line
    break falls back to ``default`` or the platform separator.
    """

    if text is None:
        raise TypeError("text cannot be None")
    for candidate in LINE_ENDINGS:
        if candidate in text:
            return candidate
    return default or os.linesep


def trim_end(text: str, suffix: str) -> str:
    """Strip every trailing repetition of ``suffix``."""

    if not suffix:
        return text
    size = len(suffix)
    end = len(text)
    while end >= size and text.startswith(suffix, end - size):
        end -= size
    return text[:end]


def is_empty_row(row: str) -> bool:
    return all(char in (COMMA, SPACE) for char in row)


__all__ = [
    "COMMA",
    "QUOTE",
    "SPACE",
    "CARRIAGE_RETURN",
    "LINE_FEED",
    "LINE_ENDINGS",
    "detect_line_ending",
    "trim_end",
    "is_empty_row",
]

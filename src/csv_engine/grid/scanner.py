"""Quote-aware scanning of comma separated text.

Every ``"`` toggles the *inside quotes* state. Commas and line endings are
structural only while outside quotes; everything else is content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterator, List, Pattern, Tuple

from .text import COMMA, LINE_FEED, QUOTE


class TokenKind(str, Enum):
    DELIMITER = "delimiter"
    LINE_BREAK = "line_break"
    QUOTE = "quote"
    CONTENT = "content"


Mark = Tuple[int, TokenKind, int]  # (offset, kind, size)


@dataclass(frozen=True, slots=True)
class RowShape:
    """Structural row with comma offsets relative to the row start."""

    offset: int
    length: int
    commas: Tuple[int, ...] = ()

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def field_count(self) -> int:
        return len(self.commas) + 1


@dataclass(frozen=True, slots=True)
class GridScan:
    """Per-row comma table produced by :func:`scan`."""

    new_line: str
    rows: Tuple[RowShape, ...]
    text_length: int

    @property
    def lines_count(self) -> int:
        return len(self.rows)

    @property
    def columns_count(self) -> int:
        if not self.rows:
            return 0
        return max(row.field_count for row in self.rows)

    @property
    def anomalies(self) -> Tuple[int, ...]:
        """Indexes of rows whose field count differs from ``columns_count``."""

        expected = self.columns_count
        return tuple(
            index for index, row in enumerate(self.rows) if row.field_count != expected
        )


@lru_cache(maxsize=8)
def _special_pattern(new_line: str) -> Pattern[str]:
    alternatives = [re.escape(QUOTE), re.escape(COMMA)]
    if new_line:
        alternatives.insert(0, re.escape(new_line))
    return re.compile("|".join(alternatives))


def iter_marks(
    text: str,
    new_line: str,
    *,
    track_line_breaks: bool = True,
    inside_quotes: bool = False,
) -> Iterator[Mark]:
    """Yield quotes plus structural delimiters and line breaks, in order.

    ``inside_quotes`` seeds the quote state when ``text`` is a slice that
    starts within a quoted field.
    """

    for match in _special_pattern(new_line).finditer(text):
        token = match.group()
        start = match.start()
        if token == QUOTE:
            inside_quotes = not inside_quotes
            yield start, TokenKind.QUOTE, 1
        elif inside_quotes:
            continue
        elif token == COMMA:
            yield start, TokenKind.DELIMITER, 1
        elif track_line_breaks:
            yield start, TokenKind.LINE_BREAK, len(token)


def classify(
    text: str, new_line: str, *, track_line_breaks: bool = True
) -> Iterator[Tuple[int, TokenKind]]:
    """Classify ``text`` token by token.

    A multi-character line ending is reported once, at its first offset. With
    ``track_line_breaks`` disabled line endings are plain content.
    """

    position = 0
    for start, kind, size in iter_marks(
        text, new_line, track_line_breaks=track_line_breaks
    ):
        for offset in range(position, start):
            yield offset, TokenKind.CONTENT
        yield start, kind
        position = start + size
    for offset in range(position, len(text)):
        yield offset, TokenKind.CONTENT


def scan(text: str, new_line: str) -> GridScan:
    """Build the per-row structural comma table in a single pass."""

    if text is None:
        raise TypeError("text cannot be None")

    rows: List[RowShape] = []
    row_start = 0
    commas: List[int] = []
    for start, kind, size in iter_marks(text, new_line):
        if kind is TokenKind.DELIMITER:
            commas.append(start - row_start)
        elif kind is TokenKind.LINE_BREAK:
            rows.append(RowShape(row_start, start - row_start, tuple(commas)))
            row_start = start + size
            commas = []
    rows.append(RowShape(row_start, len(text) - row_start, tuple(commas)))
    return GridScan(new_line=new_line, rows=tuple(rows), text_length=len(text))


def split_rows(text: str, new_line: str) -> List[str]:
    """Split on structural line endings only."""

    return [text[row.offset : row.end] for row in scan(text, new_line).rows]


def split_fields(row: str) -> List[str]:
    """Split a single row on structural commas."""

    fields: List[str] = []
    position = 0
    for start, kind, _size in iter_marks(row, LINE_FEED, track_line_breaks=False):
        if kind is TokenKind.DELIMITER:
            fields.append(row[position:start])
            position = start + 1
    fields.append(row[position:])
    return fields


def count_structural_commas(chunk: str) -> int:
    return sum(
        1
        for _start, kind, _size in iter_marks(chunk, LINE_FEED, track_line_breaks=False)
        if kind is TokenKind.DELIMITER
    )


def is_inside_quotes(text: str, offset: int) -> bool:
    """Whether ``offset`` sits inside a quoted field."""

    return text.count(QUOTE, 0, offset) % 2 == 1


__all__ = [
    "TokenKind",
    "RowShape",
    "GridScan",
    "iter_marks",
    "classify",
    "scan",
    "split_rows",
    "split_fields",
    "count_structural_commas",
    "is_inside_quotes",
]

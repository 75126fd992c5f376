"""Structural transforms over comma separated text.

Every function is pure: it takes the current text plus structural
parameters and returns the new text, which the caller writes back in one
replace. Results never end with the line-ending symbol. Index arguments are
trusted; the editor facade validates them before calling in.
"""

from __future__ import annotations

from typing import List

from csv_engine.runtime.telemetry import span

from .scanner import (
    TokenKind,
    count_structural_commas,
    is_inside_quotes,
    iter_marks,
    scan,
    split_rows,
)
from .text import COMMA, detect_line_ending, trim_end


def insert_column(
    text: str, column_index: int, lines_count: int, columns_count: int, new_line: str
) -> str:
    """Insert an empty column at ``column_index`` on every row."""

    with span(
        "transform::insert_column",
        component="transforms",
        metadata={
            "column": column_index,
            "lines": lines_count,
            "columns": columns_count,
        },
    ):
        prepend = column_index == 0
        append = column_index == columns_count
        parts: List[str] = [COMMA] if prepend else []
        position = 0
        comma_counter = 0

        for start, kind, size in iter_marks(text, new_line):
            if kind is TokenKind.DELIMITER:
                comma_counter += 1
                if not (prepend or append) and comma_counter == column_index:
                    parts.append(text[position:start])
                    parts.append(COMMA)
                    position = start
            elif kind is TokenKind.LINE_BREAK:
                comma_counter = 0
                parts.append(text[position:start])
                if append:
                    parts.append(COMMA)
                parts.append(text[start : start + size])
                if prepend:
                    parts.append(COMMA)
                position = start + size

        parts.append(text[position:])
        if append:
            parts.append(COMMA)
        return trim_end("".join(parts), new_line)


def remove_column(
    text: str, column_index: int, lines_count: int, columns_count: int, new_line: str
) -> str:
    """Drop the column at ``column_index`` together with one delimiter.

    Removing the only column collapses the grid to empty text.
    """

    with span(
        "transform::remove_column",
        component="transforms",
        metadata={
            "column": column_index,
            "lines": lines_count,
            "columns": columns_count,
        },
    ):
        if columns_count <= 1 or lines_count == 0:
            return ""

        is_last_column = column_index == columns_count - 1
        parts: List[str] = []
        field_start = 0
        field_index = 0

        for start, kind, size in iter_marks(text, new_line):
            if kind is TokenKind.DELIMITER:
                if field_index != column_index:
                    # no comma follows the last column, drop the one before it
                    keep_comma = not (is_last_column and field_index + 1 == column_index)
                    parts.append(text[field_start : start + 1 if keep_comma else start])
                field_index += 1
                field_start = start + 1
            elif kind is TokenKind.LINE_BREAK:
                if field_index != column_index:
                    parts.append(text[field_start:start])
                parts.append(text[start : start + size])
                field_index = 0
                field_start = start + size

        if field_index != column_index:
            parts.append(text[field_start:])
        return trim_end("".join(parts), new_line)


def insert_line(
    text: str, insert_line_index: int, columns_count: int, new_line: str
) -> str:
    """Insert a row of empty cells before row ``insert_line_index``."""

    with span(
        "transform::insert_line",
        component="transforms",
        metadata={"line": insert_line_index, "columns": columns_count},
    ):
        empty_row = COMMA * max(columns_count - 1, 0)
        if insert_line_index <= 0:
            return trim_end(empty_row + new_line + text, new_line)

        rows = scan(text, new_line).rows
        if insert_line_index >= len(rows):
            return trim_end(text + new_line + empty_row, new_line)

        position = rows[insert_line_index].offset
        return trim_end(
            text[:position] + empty_row + new_line + text[position:], new_line
        )


def insert_line_with_text_transfer(
    text: str,
    insert_line_index: int,
    offset_in_line: int,
    columns_count: int,
    new_line: str,
) -> str:
    """Split row ``insert_line_index - 1`` at ``offset_in_line``.

    The left part is padded with trailing commas back to a full row; the new
    row starts with one comma per cell left behind, followed by the rest of
    the original row. Index ``0`` prepends an empty row instead.
    """

    if insert_line_index == 0:
        return insert_line(text, 0, columns_count, new_line)

    with span(
        "transform::insert_line_with_text_transfer",
        component="transforms",
        metadata={
            "line": insert_line_index,
            "offset": offset_in_line,
            "columns": columns_count,
        },
    ):
        row = scan(text, new_line).rows[insert_line_index - 1]
        left_chunk = text[row.offset : row.offset + offset_in_line]
        split_column_index = count_structural_commas(left_chunk)

        insertion = (
            COMMA * max(columns_count - split_column_index - 1, 0)
            + new_line
            + COMMA * split_column_index
        )
        position = row.offset + offset_in_line
        return trim_end(text[:position] + insertion + text[position:], new_line)


def remove_line(text: str, line_index: int, new_line: str) -> str:
    """Remove row ``line_index`` and one adjacent line ending."""

    rows = scan(text, new_line).rows
    row = rows[line_index]
    if line_index < len(rows) - 1:
        start, end = row.offset, rows[line_index + 1].offset
    else:
        start = rows[line_index - 1].end if line_index > 0 else 0
        end = row.end
    return remove_text(text, start, end, new_line)


def duplicate_text_in_line(
    text: str, start_offset: int, end_offset: int, new_line: str
) -> str:
    """Copy ``text[start_offset:end_offset]`` and re-insert it at ``end_offset``."""

    with span(
        "transform::duplicate_text_in_line",
        component="transforms",
        metadata={"start": start_offset, "end": end_offset},
    ):
        chunk = text[start_offset:end_offset]
        if not chunk.endswith(new_line):
            chunk = new_line + chunk
        return trim_end(text[:end_offset] + chunk + text[end_offset:], new_line)


def duplicate_line(text: str, line_index: int, new_line: str) -> str:
    rows = scan(text, new_line).rows
    row = rows[line_index]
    end = rows[line_index + 1].offset if line_index < len(rows) - 1 else row.end
    return duplicate_text_in_line(text, row.offset, end, new_line)


def remove_text(text: str, start_offset: int, end_offset: int, new_line: str) -> str:
    with span(
        "transform::remove_text",
        component="transforms",
        metadata={"start": start_offset, "end": end_offset},
    ):
        return trim_end(text[:start_offset] + text[end_offset:], new_line)


def remove_comma_separated_text(
    text: str, position_start: int, length: int, new_line: str
) -> str:
    """Delete a span but keep the structural delimiters it contained.

    Content characters in the span are dropped; its structural commas and
    line endings are re-emitted in order so surrounding rows keep their
    shape.
    """

    with span(
        "transform::remove_comma_separated_text",
        component="transforms",
        metadata={"start": position_start, "length": length},
    ):
        end_position = position_start + length
        removed = text[position_start:end_position]
        replacement: List[str] = []
        for _start, kind, size in iter_marks(
            removed,
            new_line,
            inside_quotes=is_inside_quotes(text, position_start),
        ):
            if kind is TokenKind.DELIMITER:
                replacement.append(COMMA)
            elif kind is TokenKind.LINE_BREAK:
                replacement.append(new_line)

        return trim_end(
            text[:position_start] + "".join(replacement) + text[end_position:],
            new_line,
        )


def remove_empty_lines(text: str, new_line: str | None = None) -> str:
    symbol = new_line or detect_line_ending(text)
    return symbol.join(row for row in split_rows(text, symbol) if row)


__all__ = [
    "insert_column",
    "remove_column",
    "insert_line",
    "insert_line_with_text_transfer",
    "remove_line",
    "duplicate_text_in_line",
    "duplicate_line",
    "remove_text",
    "remove_comma_separated_text",
    "remove_empty_lines",
]

"""Versioned shape model mapping buffer offsets to grid coordinates."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from csv_engine.runtime import telemetry

from .scanner import RowShape, scan
from .text import detect_line_ending


@dataclass(frozen=True, slots=True)
class Column:
    index: int
    offset: int  # relative to the owning line
    width: int


@dataclass(frozen=True, slots=True)
class Line:
    index: int
    offset: int
    length: int


@dataclass(frozen=True, slots=True)
class Location:
    offset: int
    line: Line
    column: Column


@dataclass(frozen=True, slots=True)
class ShapeModel:
    """Immutable snapshot of the grid derived from one version of the text.

    ``refresh`` and ``invalidate_incremental`` never mutate the model; they
    return a successor with ``version + 1``. Holders of an older version must
    re-fetch after a buffer mutation.
    """

    new_line: str
    rows: Tuple[RowShape, ...]
    text_length: int
    columns_count: int
    column_widths: Tuple[int, ...] = ()
    version: int = 0
    _row_offsets: Tuple[int, ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_row_offsets", tuple(row.offset for row in self.rows)
        )

    @classmethod
    def build(
        cls, text: str, new_line: str | None = None, *, version: int = 0
    ) -> "ShapeModel":
        symbol = new_line or detect_line_ending(text)
        grid = scan(text, symbol)
        anomalies = grid.anomalies
        if anomalies:
            telemetry.record_event(
                "shape.anomaly",
                level="debug",
                data={"rows": anomalies[:10], "count": len(anomalies)},
            )
        return cls(
            new_line=symbol,
            rows=grid.rows,
            text_length=grid.text_length,
            columns_count=grid.columns_count,
            column_widths=_column_widths(grid.rows, grid.columns_count),
            version=version,
        )

    def refresh(self, text: str) -> "ShapeModel":
        """Full rebuild from ``text``; O(len(text))."""

        return ShapeModel.build(text, self.new_line, version=self.version + 1)

    @property
    def lines_count(self) -> int:
        return len(self.rows)

    def line_and_column_count(self) -> Tuple[int, int]:
        return self.lines_count, self.columns_count

    def line(self, index: int) -> Line:
        row = self.rows[index]
        return Line(index=index, offset=row.offset, length=row.length)

    def line_index_at(self, offset: int) -> int:
        return max(bisect_right(self._row_offsets, offset) - 1, 0)

    def offset_to_location(self, offset: int) -> Optional[Location]:
        if offset < 0 or offset > self.text_length or not self.rows:
            return None

        index = self.line_index_at(offset)
        row = self.rows[index]
        if offset > row.end:
            # between the characters of a multi-character line ending
            return None
        if row.length == 0 and index > 0 and index == len(self.rows) - 1:
            return None

        relative = offset - row.offset
        column_index = bisect_left(row.commas, relative)
        start, stop = _field_bounds(row, column_index)
        return Location(
            offset=offset,
            line=Line(index=index, offset=row.offset, length=row.length),
            column=Column(index=column_index, offset=start, width=stop - start),
        )

    def location_to_offset(self, line_index: int, column_index: int) -> int:
        """Absolute offset of the first character of a cell."""

        row = self.rows[line_index]
        column_index = min(max(column_index, 0), row.field_count - 1)
        start, _stop = _field_bounds(row, column_index)
        return row.offset + start

    def column_index_at(self, offset: int) -> int:
        location = self.offset_to_location(offset)
        return location.column.index if location else -1

    def invalidate_incremental(
        self, affected_offset: int, length_delta: int
    ) -> Tuple["ShapeModel", bool]:
        """Shift cached offsets after an edit that kept the comma structure.

        Returns the successor model and whether a column's display width
        changed. Edits that add or remove delimiters need :meth:`refresh`.
        """

        if length_delta == 0 or not self.rows:
            return self, False

        index = self.line_index_at(affected_offset)
        row = self.rows[index]
        relative = affected_offset - row.offset
        updated_row = RowShape(
            offset=row.offset,
            length=max(row.length + length_delta, 0),
            commas=tuple(
                comma + length_delta if comma >= relative else comma
                for comma in row.commas
            ),
        )

        rows: List[RowShape] = list(self.rows[:index])
        rows.append(updated_row)
        rows.extend(
            RowShape(r.offset + length_delta, r.length, r.commas)
            for r in self.rows[index + 1 :]
        )

        widths = list(self.column_widths)
        for column_index, width in enumerate(_row_widths(updated_row)):
            if column_index >= len(widths):
                widths.append(width)
            elif width > widths[column_index]:
                widths[column_index] = width
        widths_tuple = tuple(widths)

        successor = replace(
            self,
            rows=tuple(rows),
            text_length=max(self.text_length + length_delta, 0),
            column_widths=widths_tuple,
            version=self.version + 1,
        )
        return successor, widths_tuple != self.column_widths


def _field_bounds(row: RowShape, column_index: int) -> Tuple[int, int]:
    start = 0 if column_index == 0 else row.commas[column_index - 1] + 1
    stop = row.commas[column_index] if column_index < len(row.commas) else row.length
    return start, stop


def _row_widths(row: RowShape) -> List[int]:
    bounds = (-1, *row.commas, row.length)
    return [bounds[i + 1] - bounds[i] - 1 for i in range(len(bounds) - 1)]


def _column_widths(rows: Sequence[RowShape], columns_count: int) -> Tuple[int, ...]:
    widths = [0] * columns_count
    for row in rows:
        for index, width in enumerate(_row_widths(row)):
            if width > widths[index]:
                widths[index] = width
    return tuple(widths)


__all__ = ["Column", "Line", "Location", "ShapeModel"]

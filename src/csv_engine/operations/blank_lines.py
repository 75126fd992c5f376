"""Drop rows that hold nothing but commas and spaces."""

from __future__ import annotations

from typing import Iterable, List

from csv_engine.grid.text import is_empty_row

from .base import TextOperation


class RemoveBlankLinesOperation(TextOperation):
    name = "remove_blank_lines"
    description = "Remove rows without any content"

    def transform_rows(self, rows: List[str]) -> Iterable[str]:
        return (row for row in rows if not is_empty_row(row))

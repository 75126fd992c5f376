"""Trim leading and trailing whitespace in every cell."""

from __future__ import annotations

from typing import Iterable, List

from csv_engine.grid import COMMA, split_fields

from .base import TextOperation


def trim_row(row: str) -> str:
    return COMMA.join(field.strip() for field in split_fields(row))


class TrimWhitespacesOperation(TextOperation):
    name = "trim_whitespaces"
    description = "Trim whitespace around every cell"

    def transform_rows(self, rows: List[str]) -> Iterable[str]:
        return (trim_row(row) for row in rows)

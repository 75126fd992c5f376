"""Structural gestures: whole columns and rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core import ActionResult

if TYPE_CHECKING:  # pragma: no cover
    from csv_engine.editor import CsvEditor
    from csv_engine.keymaps import Binding


def insert_column(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.insert_column()
    return ActionResult(consumed=True, status="insert_column")


def remove_column(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.remove_column()
    return ActionResult(consumed=True, status="remove_column")


def insert_line_below(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.insert_line()
    return ActionResult(consumed=True, status="insert_line")


def insert_line_above(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.insert_line(above=True)
    return ActionResult(consumed=True, status="insert_line")


def split_line(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    """Enter outside quotes breaks the row; inside quotes it is plain text."""

    del binding
    if editor.is_caret_within_quoted_field():
        editor.insert_at_caret(editor.line_ending)
        return ActionResult(consumed=True, status="insert_text")
    editor.insert_line_with_text_transfer()
    return ActionResult(consumed=True, status="split_line")


def remove_line(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.remove_line()
    return ActionResult(consumed=True, status="remove_line")


def duplicate_line(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.duplicate_line()
    return ActionResult(consumed=True, status="duplicate_line")


__all__ = [
    "insert_column",
    "remove_column",
    "insert_line_below",
    "insert_line_above",
    "split_line",
    "remove_line",
    "duplicate_line",
]

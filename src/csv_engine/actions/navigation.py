"""Caret movement across characters, rows and cells."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core import ActionResult

if TYPE_CHECKING:  # pragma: no cover
    from csv_engine.editor import CsvEditor
    from csv_engine.keymaps import Binding


def _move_to(editor: "CsvEditor", offset: int) -> ActionResult:
    offset = max(0, min(offset, len(editor.get_text())))
    editor.move_caret(offset)
    return ActionResult(consumed=True, status="move")


def _move_vertically(editor: "CsvEditor", delta: int) -> ActionResult:
    location = editor.get_location()
    if location is None:
        return ActionResult(consumed=True, status="move")
    target = location.line.index + delta
    if target < 0 or target >= editor.lines_count:
        return ActionResult(consumed=True, status="boundary")
    line = editor.shape.line(target)
    column = location.offset - location.line.offset
    return _move_to(editor, line.offset + min(column, line.length))


def caret_left(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    offset = editor.caret_offset - 1
    if offset > 0 and editor.get_location(offset) is None:
        # step over the second half of a two-character line ending
        offset -= 1
    return _move_to(editor, offset)


def caret_right(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    offset = editor.caret_offset + 1
    if editor.get_location(offset) is None:
        offset += 1
    return _move_to(editor, offset)


def caret_up(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _move_vertically(editor, -1)


def caret_down(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _move_vertically(editor, 1)


def next_cell(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    location = editor.get_location()
    if location is None:
        return ActionResult(consumed=True, status="move")
    row = editor.shape.rows[location.line.index]
    if location.column.index + 1 < row.field_count:
        editor.goto_position(location.line.index, location.column.index + 1)
    elif location.line.index + 1 < editor.lines_count:
        editor.goto_position(location.line.index + 1, 0)
    else:
        return ActionResult(consumed=True, status="boundary")
    return ActionResult(consumed=True, status="next_cell")


def previous_cell(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    location = editor.get_location()
    if location is None:
        return ActionResult(consumed=True, status="move")
    if location.column.index > 0:
        editor.goto_position(location.line.index, location.column.index - 1)
    elif location.line.index > 0:
        previous = editor.shape.rows[location.line.index - 1]
        editor.goto_position(location.line.index - 1, previous.field_count - 1)
    else:
        return ActionResult(consumed=True, status="boundary")
    return ActionResult(consumed=True, status="previous_cell")


__all__ = [
    "caret_left",
    "caret_right",
    "caret_up",
    "caret_down",
    "next_cell",
    "previous_cell",
]

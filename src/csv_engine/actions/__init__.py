"""Gesture handlers invoked through keymap bindings."""

from .core import ActionResult
from .editing import (
    copy_selection,
    cut_selection,
    delete_next,
    delete_previous,
    paste_clipboard,
    redo,
    remove_blank_lines,
    trim_whitespaces,
    undo,
)
from .grid import (
    duplicate_line,
    insert_column,
    insert_line_above,
    insert_line_below,
    remove_column,
    remove_line,
    split_line,
)
from .navigation import (
    caret_down,
    caret_left,
    caret_right,
    caret_up,
    next_cell,
    previous_cell,
)

__all__ = [
    "ActionResult",
    "insert_column",
    "remove_column",
    "insert_line_below",
    "insert_line_above",
    "split_line",
    "remove_line",
    "duplicate_line",
    "delete_next",
    "delete_previous",
    "copy_selection",
    "cut_selection",
    "paste_clipboard",
    "undo",
    "redo",
    "trim_whitespaces",
    "remove_blank_lines",
    "caret_left",
    "caret_right",
    "caret_up",
    "caret_down",
    "next_cell",
    "previous_cell",
]

"""Cell-level editing, clipboard, history and bulk operation gestures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core import ActionResult

if TYPE_CHECKING:  # pragma: no cover
    from csv_engine.editor import CsvEditor
    from csv_engine.keymaps import Binding


def _result(changed: bool, status: str) -> ActionResult:
    # a refused gesture still swallows the key so the host does not apply it
    return ActionResult(consumed=True, status=status if changed else "rejected")


def delete_next(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _result(editor.delete_next_selected_text(), "delete_next")


def delete_previous(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _result(editor.delete_previous_selected_text(), "delete_previous")


def copy_selection(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    copied = editor.copy()
    return ActionResult(consumed=copied, status="copy" if copied else "no_selection")


def cut_selection(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    if not editor.cut():
        return ActionResult(consumed=False, status="no_selection")
    return ActionResult(consumed=True, status="cut")


def paste_clipboard(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.paste()
    return ActionResult(consumed=True, status="paste")


def undo(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _result(editor.undo(), "undo")


def redo(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    return _result(editor.redo(), "redo")


def trim_whitespaces(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.apply_operation("trim_whitespaces")
    return ActionResult(consumed=True, status="trim_whitespaces")


def remove_blank_lines(editor: "CsvEditor", binding: "Binding") -> ActionResult:
    del binding
    editor.apply_operation("remove_blank_lines")
    return ActionResult(consumed=True, status="remove_blank_lines")


__all__ = [
    "delete_next",
    "delete_previous",
    "copy_selection",
    "cut_selection",
    "paste_clipboard",
    "undo",
    "redo",
    "trim_whitespaces",
    "remove_blank_lines",
]

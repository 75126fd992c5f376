"""Text host, undo history, clipboard, and the editing state machine."""

from .buffer import TextBuffer, Transaction
from .registers import Clipboard
from .state import (
    EditModeGuard,
    EditingState,
    EditingStateMachine,
    InvalidTransitionError,
)
from .sync import BufferValidationError, DocumentChange, EditorHost, Selection
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_offset, ensure_range, ensure_text

__all__ = [
    "BufferValidationError",
    "Clipboard",
    "DocumentChange",
    "EditModeGuard",
    "EditingState",
    "EditingStateMachine",
    "EditorHost",
    "InvalidTransitionError",
    "Selection",
    "TextBuffer",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "ensure_offset",
    "ensure_range",
    "ensure_text",
]

"""In-memory text host: flat text, caret, selection, undo, change listeners."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, ContextManager, List, Optional

from csv_engine.runtime import telemetry

from .sync import ChangeListener, DocumentChange, Selection
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_offset, ensure_range, ensure_text


class TextBuffer:
    """Headless stand-in for an editing widget.

    Listeners are notified after a replace has been applied, so they always
    observe the settled text.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        history: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.history = history or UndoTimeline()
        self.version = 0
        self._text = ensure_text(text)
        self._caret = 0
        self._selection: Selection = (0, 0)
        self._listeners: List[ChangeListener] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def caret_offset(self) -> int:
        return self._caret

    @caret_offset.setter
    def caret_offset(self, offset: int) -> None:
        self._caret = ensure_offset(self._text, offset)
        self._selection = (self._caret, 0)

    @property
    def selection(self) -> Selection:
        return self._selection

    def select(self, start: int, length: int) -> None:
        ensure_range(self._text, start, length)
        self._selection = (start, length)
        self._caret = start + length

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo()

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(
        self, offset: int, length: int, text: str, *, label: str = "replace"
    ) -> DocumentChange:
        ensure_text(text)
        ensure_range(self._text, offset, length)
        with Transaction(self, label) as tx:
            before = self._text
            caret_before = self._caret
            after = before[:offset] + text + before[offset + length :]
            self._caret = _shift(self._caret, offset, length, len(text))
            tx.commit(before, after, caret_before)
            change = self._apply(offset, before[offset : offset + length], text, after)
        self._notify(change)
        return change

    def insert(self, offset: int, text: str) -> DocumentChange:
        return self.replace(offset, 0, text, label="insert")

    def remove(self, offset: int, length: int) -> DocumentChange:
        return self.replace(offset, length, "", label="remove")

    def set_text(self, text: str) -> DocumentChange:
        return self.replace(0, len(self._text), text, label="set_text")

    def undo(self) -> bool:
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry.before_text, entry.caret_before)
        return True

    def redo(self) -> bool:
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry.after_text, entry.caret_after)
        return True

    def clear_undo(self) -> None:
        self.history.clear()

    def _restore(self, text: str, caret: int) -> None:
        before = self._text
        change = self._apply(0, before, text, text)
        self._caret = min(caret, len(text))
        self._notify(change)

    def _apply(
        self, offset: int, removed: str, inserted: str, after: str
    ) -> DocumentChange:
        self._text = after
        self.version += 1
        self._selection = (self._caret, 0)
        return DocumentChange(
            offset=offset,
            removed_text=removed,
            inserted_text=inserted,
            version=self.version,
        )

    def _notify(self, change: DocumentChange) -> None:
        for listener in list(self._listeners):
            listener(change)


class Transaction(AbstractContextManager["Transaction"]):
    """Profiles one replace and records it on the undo timeline."""

    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, before_text: str, after_text: str, caret_before: int) -> None:
        self.buffer.history.push(
            UndoEntry(
                label=self.label,
                before_text=before_text,
                after_text=after_text,
                caret_before=caret_before,
                caret_after=self.buffer.caret_offset,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _shift(position: int, offset: int, removed: int, inserted: int) -> int:
    if position < offset:
        return position
    if position >= offset + removed:
        return position + inserted - removed
    return offset + inserted

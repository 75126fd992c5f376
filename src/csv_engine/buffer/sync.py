"""Boundary types shared by the editor facade and the text host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Tuple

Selection = Tuple[int, int]  # (start offset, length)


@dataclass(frozen=True, slots=True)
class DocumentChange:
    """A settled replace reported by the host after it applied it."""

    offset: int
    removed_text: str
    inserted_text: str
    version: int

    @property
    def removal_length(self) -> int:
        return len(self.removed_text)

    @property
    def insertion_length(self) -> int:
        return len(self.inserted_text)

    @property
    def length_delta(self) -> int:
        return self.insertion_length - self.removal_length


ChangeListener = Callable[[DocumentChange], None]


class EditorHost(Protocol):
    """What the core needs from the widget that owns the text."""

    @property
    def text(self) -> str: ...

    @property
    def caret_offset(self) -> int: ...

    @caret_offset.setter
    def caret_offset(self, offset: int) -> None: ...

    @property
    def selection(self) -> Selection: ...

    @property
    def can_undo(self) -> bool: ...

    @property
    def can_redo(self) -> bool: ...

    def select(self, start: int, length: int) -> None: ...

    def replace(self, offset: int, length: int, text: str) -> DocumentChange: ...

    def set_text(self, text: str) -> DocumentChange: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...

    def clear_undo(self) -> None: ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer layer an out-of-range request."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


__all__ = [
    "BufferValidationError",
    "ChangeListener",
    "DocumentChange",
    "EditorHost",
    "Selection",
]

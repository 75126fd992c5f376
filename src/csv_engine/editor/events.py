"""Listener registry for editor notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

TEXT_CHANGED = "text_changed"
CARET_LOCATION_CHANGED = "caret_location_changed"
COLUMNS_RESIZED = "columns_resized"

Listener = Callable[[object], None]


@dataclass(frozen=True, slots=True)
class TextChanged:
    version: int
    text_length: int
    is_dirty: bool


class EventBus:
    """Synchronous publish/subscribe; callbacks run in subscription order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        self._subscribers.setdefault(event, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(event, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)

    def clear(self) -> None:
        self._subscribers.clear()


__all__ = [
    "CARET_LOCATION_CHANGED",
    "COLUMNS_RESIZED",
    "TEXT_CHANGED",
    "EventBus",
    "TextChanged",
]

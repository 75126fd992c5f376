"""Clipboard register used by cut, copy, and paste."""

from __future__ import annotations


class Clipboard:
    """In-process clipboard. Host adapters override the ``system_*`` hooks."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def get_text(self) -> str:
        system = self.system_get()
        return self._text if system is None else system

    def set_text(self, text: str) -> None:
        self._text = text
        self.system_set(text)

    def system_get(self) -> str | None:  # stub, host adapters override
        return None

    def system_set(self, text: str) -> None:  # stub, host adapters override
        _ = text

"""Base classes for bulk text operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

from csv_engine.grid import split_rows
from csv_engine.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover
    from csv_engine.editor import CsvEditor


class Operation:
    """A named command executed against an editor."""

    name: str = "operation"
    description: str = ""

    def __init__(self, editor: "CsvEditor") -> None:
        self.editor = editor

    def execute(self) -> None:  # pragma: no cover - abstract override
        raise NotImplementedError


class TextOperation(Operation):
    """Reads the whole text, rewrites it row by row, writes it back once.

    Rows are split on structural line endings only, so quoted line breaks
    stay inside their row.
    """

    def execute(self) -> None:
        text = self.editor.get_text()
        new_line = self.editor.line_ending
        with telemetry.span(
            f"operation::{self.name}",
            component="operations",
            metadata={"length": len(text)},
        ) as handle:
            result = self.apply(text, new_line)
            if result == text:
                handle.add_metadata("changed", False)
                return
            self.editor.set_text(result)

    def apply(self, text: str, new_line: str) -> str:
        return new_line.join(self.transform_rows(split_rows(text, new_line)))

    def transform_rows(
        self, rows: List[str]
    ) -> Iterable[str]:  # pragma: no cover - abstract override
        raise NotImplementedError


__all__ = ["Operation", "TextOperation"]

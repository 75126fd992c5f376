"""Editor facade wiring the grid engine to a text host."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from typing import Callable, List, Optional

from csv_engine.buffer import (
    BufferValidationError,
    Clipboard,
    DocumentChange,
    EditingStateMachine,
    EditorHost,
    TextBuffer,
    ensure_offset,
    ensure_text,
)
from csv_engine.config import EditorConfig
from csv_engine.grid import (
    COMMA,
    QUOTE,
    Location,
    ShapeModel,
    detect_line_ending,
    transforms,
)
from csv_engine.grid.text import CARRIAGE_RETURN, LINE_FEED, trim_end
from csv_engine.operations import OperationRegistry, load_default_operations
from csv_engine.runtime import telemetry

from .completion import completion_candidates
from .events import (
    CARET_LOCATION_CHANGED,
    COLUMNS_RESIZED,
    TEXT_CHANGED,
    EventBus,
    Listener,
    TextChanged,
)
from .refresh import RefreshScheduler

_STRUCTURAL_CHARS = frozenset({COMMA, QUOTE, CARRIAGE_RETURN, LINE_FEED})


class GridIndexError(BufferValidationError):
    """A structural request referenced a row or column that does not exist."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class CsvEditor:
    """Grid-aware editing surface over an :class:`EditorHost`.

    Structural gestures compute the new text with :mod:`csv_engine.grid.transforms`
    and write it back with a single replace. Keystroke-sized edits coming
    from the host update the shape model incrementally and arm a debounced
    full refresh.
    """

    def __init__(
        self,
        host: Optional[EditorHost] = None,
        *,
        config: Optional[EditorConfig] = None,
        operations: Optional[OperationRegistry] = None,
        clipboard: Optional[Clipboard] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host: EditorHost = host if host is not None else TextBuffer()
        self.config = config or EditorConfig.from_env()
        self.operations = operations or load_default_operations(
            OperationRegistry(logger_name="csv_engine.operations")
        )
        self.clipboard = clipboard or Clipboard()
        self.states = EditingStateMachine()
        # text already in the host counts as loaded
        self.states.begin_editing()
        self.bus = EventBus()
        self._shape = ShapeModel.build(
            self.host.text,
            detect_line_ending(self.host.text, default=self.config.default_line_ending),
        )
        self._refresh = RefreshScheduler(self.config.refresh_delay_ms, clock=clock)
        self._last_location: Optional[Location] = None
        self._deferred_change = False
        self._initializing = False
        self._unsubscribe: Optional[Callable[[], None]] = self.host.subscribe(
            self._on_document_changed
        )

    # -- state -----------------------------------------------------------

    @property
    def shape(self) -> ShapeModel:
        return self._shape

    @property
    def lines_count(self) -> int:
        return self._shape.lines_count

    @property
    def columns_count(self) -> int:
        return self._shape.columns_count

    @property
    def line_ending(self) -> str:
        return self._shape.new_line

    @property
    def caret_offset(self) -> int:
        return self.host.caret_offset

    @property
    def has_selection(self) -> bool:
        return self.host.selection[1] > 0

    @property
    def can_undo(self) -> bool:
        return not self._initializing and self.host.can_undo

    @property
    def can_redo(self) -> bool:
        return not self._initializing and self.host.can_redo

    @property
    def is_dirty(self) -> bool:
        return self.states.is_dirty

    @property
    def refresh_pending(self) -> bool:
        return self._refresh.is_pending

    def reset_dirty(self) -> None:
        self.states.reset_dirty()

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        return self.bus.subscribe(event, callback)

    # -- text ------------------------------------------------------------

    def initialize(self, text: Optional[str]) -> None:
        """Load ``text`` as a fresh, clean document."""

        text = text or ""
        self._initializing = True
        try:
            with telemetry.span(
                "editor::initialize",
                component="editor",
                metadata={"length": len(text)},
            ):
                symbol = detect_line_ending(
                    text, default=self.config.default_line_ending
                )
                self._shape = ShapeModel.build(text, symbol)
                text = trim_end(text, self._shape.new_line)
                try:
                    with self.states.loading():
                        self.host.set_text(text)
                        self.host.caret_offset = 0
                finally:
                    self.states.reset_dirty()
                    self.host.clear_undo()
                    self._last_location = None
                    self._settle()
        finally:
            self._initializing = False

    def get_text(self) -> str:
        return self.host.text

    def set_text(self, text: str, *, caret_offset: Optional[int] = None) -> None:
        """Replace the whole text as one programmatic update."""

        ensure_text(text)
        try:
            with self.states.custom_update():
                caret = self.host.caret_offset if caret_offset is None else caret_offset
                self.host.set_text(text)
                self.host.caret_offset = min(max(caret, 0), len(text))
        finally:
            self._settle()

    def refresh_view(self) -> ShapeModel:
        self._refresh.cancel()
        self._shape = self._shape.refresh(self.host.text)
        return self._shape

    def process_pending_refresh(self) -> bool:
        """Run the debounced refresh when its quiet period has elapsed."""

        if not self._refresh.consume():
            return False
        self.refresh_view()
        return True

    def flush_refresh(self) -> bool:
        if not self._refresh.is_pending:
            return False
        self.refresh_view()
        return True

    # -- locations -------------------------------------------------------

    def get_location(self, offset: Optional[int] = None) -> Optional[Location]:
        target = self.host.caret_offset if offset is None else offset
        return self._shape.offset_to_location(target)

    def current_column_index(self) -> int:
        return self._shape.column_index_at(self.host.caret_offset)

    def move_caret(self, offset: int) -> Optional[Location]:
        self.host.caret_offset = ensure_offset(self.host.text, offset)
        return self._notify_caret()

    def select(self, start: int, length: int) -> None:
        self.host.select(start, length)
        self._notify_caret()

    def goto_position(self, line_index: int, column_index: int) -> Optional[Location]:
        self._check_index("line_index", line_index, self.lines_count - 1)
        offset = self._shape.location_to_offset(line_index, column_index)
        return self.move_caret(offset)

    def is_caret_within_quoted_field(self) -> bool:
        location = self.get_location()
        if location is None:
            return False
        text = self.host.text
        index = location.line.offset + location.column.offset
        return index < len(text) and text[index] == QUOTE

    def get_selected_text(self) -> str:
        start, length = self.host.selection
        return self.host.text[start : start + length]

    def current_cell_content(self, *, trimmed: bool = False) -> str:
        location = self.get_location()
        if location is None:
            return ""
        start = location.line.offset + location.column.offset
        content = self.host.text[start : start + location.column.width]
        return content.strip(',"') if trimmed else content

    def completion_candidates(self, prefix: str) -> List[str]:
        """Values from the caret's column that could complete ``prefix``.

        Only offered while the current cell is still empty.
        """

        if not self.config.autocomplete_enabled:
            return []
        location = self.get_location()
        if location is None or self.current_cell_content(trimmed=True).strip():
            return []
        return completion_candidates(
            self.host.text,
            self._shape,
            location.column.index,
            prefix,
            limit=self.config.completion_limit,
            skip_line=location.line.index,
        )

    # -- structural gestures ---------------------------------------------

    def insert_column(self, column_index: Optional[int] = None) -> None:
        lines, columns = self._shape.line_and_column_count()
        location = self.get_location()
        if column_index is None:
            column_index = self._require_location(location).column.index + 1
        self._check_index("column_index", column_index, columns)
        line_index = location.line.index if location else 0

        with self._gesture("insert_column", column=column_index):
            text = transforms.insert_column(
                self.host.text, column_index, lines, columns, self.line_ending
            )
            self.set_text(text)
        self.goto_position(min(line_index, self.lines_count - 1), column_index)

    def remove_column(self, column_index: Optional[int] = None) -> None:
        lines, columns = self._shape.line_and_column_count()
        location = self.get_location()
        if column_index is None:
            column_index = self._require_location(location).column.index
        self._check_index("column_index", column_index, columns - 1)
        line_index = location.line.index if location else 0

        with self._gesture("remove_column", column=column_index):
            text = transforms.remove_column(
                self.host.text, column_index, lines, columns, self.line_ending
            )
            self.set_text(text, caret_offset=0)
        if text:
            self.goto_position(
                min(line_index, self.lines_count - 1),
                min(column_index, self.columns_count - 1),
            )

    def insert_line(self, *, above: bool = False) -> None:
        """Insert an empty row below (or above) the caret's row."""

        location = self._require_location(self.get_location())
        line_index = location.line.index if above else location.line.index + 1
        with self._gesture("insert_line", line=line_index):
            text = transforms.insert_line(
                self.host.text, line_index, self.columns_count, self.line_ending
            )
            self.set_text(text)
        self.goto_position(min(line_index, self.lines_count - 1), 0)

    def insert_line_with_text_transfer(self) -> None:
        """Break the caret's row in two, moving the text after the caret down."""

        location = self._require_location(self.get_location())
        line_index = location.line.index + 1
        offset_in_line = location.offset - location.line.offset
        with self._gesture("insert_line_with_text_transfer", line=line_index):
            text = transforms.insert_line_with_text_transfer(
                self.host.text,
                line_index,
                offset_in_line,
                self.columns_count,
                self.line_ending,
            )
            self.set_text(text)
        self.goto_position(
            min(line_index, self.lines_count - 1), location.column.index
        )

    def remove_line(self, line_index: Optional[int] = None) -> None:
        if line_index is None:
            line_index = self._require_location(self.get_location()).line.index
        self._check_index("line_index", line_index, self.lines_count - 1)
        with self._gesture("remove_line", line=line_index):
            text = transforms.remove_line(self.host.text, line_index, self.line_ending)
            self.set_text(text, caret_offset=0)
        if text:
            self.goto_position(min(line_index, self.lines_count - 1), 0)

    def duplicate_line(self, line_index: Optional[int] = None) -> None:
        if line_index is None:
            line_index = self._require_location(self.get_location()).line.index
        self._check_index("line_index", line_index, self.lines_count - 1)
        with self._gesture("duplicate_line", line=line_index):
            text = transforms.duplicate_line(
                self.host.text, line_index, self.line_ending
            )
            self.set_text(text)
        self.goto_position(line_index + 1, 0)

    # -- character gestures ----------------------------------------------

    def insert_at_caret(self, char: str) -> None:
        self.host.replace(self.host.caret_offset, 0, ensure_text(char))

    def delete_next_selected_text(self) -> bool:
        if self.has_selection:
            return self.clear_selected_text()
        return self._delete_from_position(self.host.selection[0])

    def delete_previous_selected_text(self) -> bool:
        if self.has_selection:
            return self.clear_selected_text()
        return self._delete_from_position(self.host.selection[0] - 1)

    def clear_selected_text(self) -> bool:
        """Remove the selected content but keep the delimiters it spanned."""

        start, length = self.host.selection
        if length == 0:
            return False
        with self._gesture("clear_selection", start=start, length=length):
            text = transforms.remove_comma_separated_text(
                self.host.text, start, length, self.line_ending
            )
            text = transforms.remove_empty_lines(text, self.line_ending)
            self.set_text(text, caret_offset=min(start, len(text)))
        return True

    def _delete_from_position(self, position: int) -> bool:
        text = self.host.text
        if position < 0 or position >= len(text):
            return False

        deleting = text[position]
        if deleting == QUOTE:
            before = text[position - 1] if position > 0 else None
            after = text[position + 1] if position + 1 < len(text) else None
            if COMMA in (before, after):
                return False
        else:
            location = self._shape.offset_to_location(position + 1)
            relative = position + 1 - location.line.offset if location else -1
            if location is not None and location.column.offset == relative:
                # a structural comma sits right before the next cell
                return False

        if deleting in (CARRIAGE_RETURN, LINE_FEED):
            return False

        self.host.replace(position, 1, "")
        return True

    # -- clipboard -------------------------------------------------------

    def copy(self) -> bool:
        if not self.has_selection:
            return False
        self.clipboard.set_text(self.get_selected_text())
        return True

    def cut(self) -> bool:
        selected = self.get_selected_text()
        if not self.clear_selected_text():
            return False
        self.clipboard.set_text(selected)
        return True

    def paste(self, text: Optional[str] = None) -> None:
        """Insert text with delimiters stripped so the grid keeps its shape."""

        payload = self.clipboard.get_text() if text is None else text
        payload = payload.replace(COMMA, "").replace(self.line_ending, "")
        start, length = self.host.selection
        self.host.replace(start, length, payload)

    # -- history ---------------------------------------------------------

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        try:
            with self.states.undoing():
                return self.host.undo()
        finally:
            self._settle()

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        try:
            with self.states.redoing():
                return self.host.redo()
        finally:
            self._settle()

    # -- operations ------------------------------------------------------

    def apply_operation(self, name: str) -> None:
        operation = self.operations.create(name, self)
        operation.execute()

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._refresh.cancel()
        self.bus.clear()

    # -- internals -------------------------------------------------------

    def _on_document_changed(self, change: DocumentChange) -> None:
        self.states.record_change()
        if self.states.refresh_suppressed:
            self._deferred_change = True
            return

        if _is_structural(change, self.line_ending):
            self._shape = self._shape.refresh(self.host.text)
        else:
            self._shape, resized = self._shape.invalidate_incremental(
                change.offset, change.length_delta
            )
            if resized:
                self.bus.emit(COLUMNS_RESIZED, self._shape.column_widths)
        self._refresh.arm()
        self._emit_text_changed()
        self._notify_caret()

    def _settle(self) -> None:
        self.refresh_view()
        if self._deferred_change:
            self._deferred_change = False
            self._emit_text_changed()
        self._notify_caret()

    def _emit_text_changed(self) -> None:
        self.bus.emit(
            TEXT_CHANGED,
            TextChanged(
                version=self._shape.version,
                text_length=self._shape.text_length,
                is_dirty=self.is_dirty,
            ),
        )

    def _notify_caret(self) -> Optional[Location]:
        location = self.get_location()
        if location is None:
            return None
        if self._last_location is None or self._last_location.offset != location.offset:
            self._last_location = location
            self.bus.emit(CARET_LOCATION_CHANGED, location)
        return location

    def _check_index(self, name: str, value: int, maximum: int) -> None:
        if value < 0 or value > maximum:
            raise GridIndexError(
                f"{name} {value} outside 0..{maximum}", index=value
            )

    @staticmethod
    def _require_location(location: Optional[Location]) -> Location:
        if location is None:
            raise GridIndexError("Caret is not inside a cell")
        return location

    def _gesture(
        self, name: str, **metadata: object
    ) -> AbstractContextManager[telemetry.SpanHandle]:
        return telemetry.span(
            f"editor::{name}", component="editor", metadata=dict(metadata)
        )


def _is_structural(change: DocumentChange, new_line: str) -> bool:
    touched = change.inserted_text + change.removed_text
    return any(char in _STRUCTURAL_CHARS for char in touched) or new_line in touched


__all__ = ["CsvEditor", "GridIndexError"]

"""Textual adapter that routes key events to the editor and renders the grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from csv_engine.actions import ActionResult
from csv_engine.buffer import BufferValidationError
from csv_engine.editor import (
    CARET_LOCATION_CHANGED,
    COLUMNS_RESIZED,
    TEXT_CHANGED,
    CsvEditor,
)
from csv_engine.grid import Location, ShapeModel
from csv_engine.keymaps import GRID_SCOPE, KeymapRegistry, load_default_keymaps

CELL_SEPARATOR = " | "
LINE_BREAK_GLYPH = "↵"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class GridSnapshot:
    """What a host widget needs to draw the current grid."""

    text: str
    rows: List[str]
    caret: Optional[Location]
    version: int
    is_dirty: bool


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_grid: Callable[[GridSnapshot], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


def render_rows(text: str, shape: ShapeModel) -> List[str]:
    """Pad every cell to its column's widest value."""

    widths = shape.column_widths
    rendered: List[str] = []
    for row in shape.rows:
        bounds = (-1, *row.commas, row.length)
        cells = []
        for index in range(len(bounds) - 1):
            start = row.offset + bounds[index] + 1
            stop = row.offset + bounds[index + 1]
            cell = text[start:stop].replace("\r\n", LINE_BREAK_GLYPH)
            cell = cell.replace("\n", LINE_BREAK_GLYPH).replace("\r", LINE_BREAK_GLYPH)
            width = widths[index] if index < len(widths) else len(cell)
            cells.append(cell.ljust(width))
        rendered.append(CELL_SEPARATOR.join(cells).rstrip())
    return rendered


class TextualCsvAdapter:
    """Bridges key presses and editor notifications to a Textual surface."""

    def __init__(
        self,
        editor: CsvEditor,
        hooks: TextualUIHooks,
        *,
        registry: Optional[KeymapRegistry] = None,
        scope: str = GRID_SCOPE,
    ) -> None:
        self.editor = editor
        self.hooks = hooks
        self.registry = registry or load_default_keymaps(
            KeymapRegistry(logger_name="csv_engine.keymaps")
        )
        self.scope = scope
        self._unsubscribers = [
            editor.subscribe(event, lambda payload, name=event: self._handle_event(name, payload))
            for event in (TEXT_CHANGED, CARET_LOCATION_CHANGED, COLUMNS_RESIZED)
        ]
        self._refresh_grid()

    def flags(self) -> Mapping[str, bool]:
        return {
            "has_selection": self.editor.has_selection,
            "in_quotes": self.editor.is_caret_within_quoted_field(),
            "is_dirty": self.editor.is_dirty,
            "can_undo": self.editor.can_undo,
            "can_redo": self.editor.can_redo,
        }

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> ActionResult:
        """Run the bound action for ``key`` or type ``character`` at the caret."""

        self._log_state("key ->", key=key, character=character)
        try:
            result = self._dispatch(key, character)
        except BufferValidationError as exc:
            result = ActionResult(consumed=True, status="error", message=str(exc))
        self._after_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def process_pending_refresh(self) -> bool:
        refreshed = self.editor.process_pending_refresh()
        if refreshed:
            self._refresh_grid()
        return refreshed

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _dispatch(self, key: str, character: Optional[str]) -> ActionResult:
        binding = self.registry.lookup(self.scope, key, self.flags())
        if binding is not None:
            action = self.registry.get_action(binding.action_id)
            outcome = action(self.editor, binding)
            if isinstance(outcome, ActionResult):
                return outcome
            return ActionResult(consumed=True, status=binding.action_id)

        if character and character.isprintable():
            if self.editor.has_selection:
                self.editor.clear_selected_text()
            self.editor.insert_at_caret(character)
            return ActionResult(consumed=True, status="insert_text")
        return ActionResult(consumed=False, status="unbound")

    def _after_result(self, result: ActionResult) -> None:
        status = result.message or result.status
        if status and result.status != "insert_text":
            self.hooks.update_status(status)
        self._refresh_grid()

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)

    def _refresh_grid(self) -> None:
        editor = self.editor
        text = editor.get_text()
        self.hooks.update_grid(
            GridSnapshot(
                text=text,
                rows=render_rows(text, editor.shape),
                caret=editor.get_location(),
                version=editor.shape.version,
                is_dirty=editor.is_dirty,
            )
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        editor = self.editor
        return {
            "caret": editor.caret_offset,
            "selection": editor.host.selection,
            "dirty": editor.is_dirty,
            "version": editor.shape.version,
            "refresh_pending": editor.refresh_pending,
        }


__all__ = ["GridSnapshot", "TextualCsvAdapter", "TextualUIHooks", "render_rows"]

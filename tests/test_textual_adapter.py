from __future__ import annotations

from typing import List

from csv_engine.config import EditorConfig
from csv_engine.editor import CsvEditor
from csv_engine.grid import ShapeModel
from csv_engine.keymaps import ActionRef, Binding, KeymapRegistry, KeyStroke
from csv_engine.adapters.textual import (
    GridSnapshot,
    TextualCsvAdapter,
    TextualUIHooks,
    render_rows,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class Recorder:
    def __init__(self) -> None:
        self.grids: List[GridSnapshot] = []
        self.statuses: List[str] = []
        self.events: List[tuple[str, object | None]] = []
        self.logs: List[str] = []

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_grid=self.grids.append,
            update_status=self.statuses.append,
            handle_event=lambda name, payload: self.events.append((name, payload)),
            log=self.logs.append,
        )


def make_editor(text: str = "a,b\nc,d", clock: FakeClock | None = None) -> CsvEditor:
    editor = CsvEditor(config=EditorConfig(), clock=clock or FakeClock())
    editor.initialize(text)
    return editor


def make_adapter(
    text: str = "a,b\nc,d",
    *,
    clock: FakeClock | None = None,
    registry: KeymapRegistry | None = None,
) -> tuple[TextualCsvAdapter, Recorder]:
    recorder = Recorder()
    adapter = TextualCsvAdapter(
        make_editor(text, clock), recorder.hooks(), registry=registry
    )
    return adapter, recorder


def test_render_rows_pads_cells_to_column_width() -> None:
    text = 'a,bbb\ncc,"d\ne"'

    rows = render_rows(text, ShapeModel.build(text, "\n"))

    assert rows == ["a  | bbb", 'cc | "d↵e"']


def test_adapter_pushes_initial_grid() -> None:
    _adapter, recorder = make_adapter()

    assert recorder.grids[-1].rows == ["a | b", "c | d"]
    assert recorder.grids[-1].is_dirty is False


def test_printable_character_is_inserted() -> None:
    adapter, recorder = make_adapter()

    result = adapter.handle_textual_key("x", character="x")

    assert result.consumed is True
    assert result.status == "insert_text"
    assert adapter.editor.get_text() == "xa,b\nc,d"
    assert recorder.grids[-1].is_dirty is True
    assert [name for name, _payload in recorder.events] == [
        "columns_resized",
        "text_changed",
        "caret_location_changed",
    ]


def test_typing_replaces_selection() -> None:
    adapter, _recorder = make_adapter()
    adapter.editor.select(0, 1)

    adapter.handle_textual_key("z", character="z")

    assert adapter.editor.get_text() == "z,b\nc,d"


def test_bound_keys_run_editor_gestures() -> None:
    adapter, recorder = make_adapter()

    adapter.handle_textual_key("alt+i")
    assert adapter.editor.get_text() == "a,,b\nc,,d"
    assert recorder.statuses[-1] == "insert_column"

    adapter.handle_textual_key("ctrl+z")
    assert adapter.editor.get_text() == "a,b\nc,d"
    assert recorder.statuses[-1] == "undo"


def test_enter_splits_row_outside_quotes() -> None:
    adapter, _recorder = make_adapter("a,b,c")
    adapter.editor.move_caret(3)

    adapter.handle_textual_key("enter", character="\r")

    assert adapter.editor.get_text() == "a,b,\n,,c"


def test_backspace_on_delimiter_is_rejected_but_consumed() -> None:
    adapter, recorder = make_adapter()
    adapter.editor.move_caret(2)

    result = adapter.handle_textual_key("backspace")

    assert result.consumed is True
    assert recorder.statuses[-1] == "rejected"
    assert adapter.editor.get_text() == "a,b\nc,d"


def test_copy_requires_selection() -> None:
    adapter, _recorder = make_adapter()

    assert adapter.handle_textual_key("ctrl+c").status == "unbound"

    adapter.editor.select(0, 1)
    assert adapter.handle_textual_key("ctrl+c").status == "copy"
    assert adapter.editor.clipboard.get_text() == "a"


def test_unbound_key_is_not_consumed() -> None:
    adapter, recorder = make_adapter()

    result = adapter.handle_textual_key("f5")

    assert result.consumed is False
    assert any(line.startswith("key ->") for line in recorder.logs)


def test_editor_errors_surface_as_status() -> None:
    registry = KeymapRegistry()
    registry.register_action(
        ActionRef("test.jump", lambda editor, binding: editor.goto_position(9, 0))
    )
    registry.register_binding(
        Binding(
            id="grid.jump",
            scope="grid",
            stroke=KeyStroke.parse("f9"),
            action_id="test.jump",
        )
    )
    adapter, recorder = make_adapter(registry=registry)

    result = adapter.handle_textual_key("f9")

    assert result.status == "error"
    assert "line_index" in recorder.statuses[-1]


def test_pending_refresh_redraws_grid() -> None:
    clock = FakeClock()
    adapter, recorder = make_adapter(clock=clock)
    adapter.handle_textual_key("x", character="x")
    drawn = len(recorder.grids)

    assert adapter.process_pending_refresh() is False
    clock.now = 1.0
    assert adapter.process_pending_refresh() is True
    assert len(recorder.grids) == drawn + 1


def test_close_stops_event_relay() -> None:
    adapter, recorder = make_adapter()

    adapter.close()
    adapter.editor.insert_at_caret("x")

    assert recorder.events == []

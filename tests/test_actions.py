from csv_engine import actions
from csv_engine.config import EditorConfig
from csv_engine.editor import CsvEditor
from csv_engine.keymaps import Binding, KeyStroke

BINDING = Binding(id="test", scope="grid", stroke=KeyStroke("f1"), action_id="test")


def make_editor(text: str = "ab,cd\nef,gh", caret: int = 0) -> CsvEditor:
    editor = CsvEditor(config=EditorConfig())
    editor.initialize(text)
    editor.move_caret(caret)
    return editor


def test_caret_right_and_left() -> None:
    editor = make_editor()

    actions.caret_right(editor, BINDING)
    assert editor.caret_offset == 1

    actions.caret_left(editor, BINDING)
    actions.caret_left(editor, BINDING)
    assert editor.caret_offset == 0


def test_caret_skips_inside_crlf() -> None:
    editor = make_editor("ab\r\ncd", caret=2)

    actions.caret_right(editor, BINDING)
    assert editor.caret_offset == 4

    actions.caret_left(editor, BINDING)
    assert editor.caret_offset == 2


def test_caret_up_and_down_keep_column_offset() -> None:
    editor = make_editor(caret=1)

    actions.caret_down(editor, BINDING)
    assert editor.caret_offset == 7

    result = actions.caret_down(editor, BINDING)
    assert result.status == "boundary"

    actions.caret_up(editor, BINDING)
    assert editor.caret_offset == 1


def test_next_and_previous_cell_wrap_rows() -> None:
    editor = make_editor()

    actions.next_cell(editor, BINDING)
    assert editor.caret_offset == 3
    actions.next_cell(editor, BINDING)
    assert editor.caret_offset == 6

    actions.previous_cell(editor, BINDING)
    assert editor.caret_offset == 3


def test_next_cell_stops_at_last_cell() -> None:
    editor = make_editor(caret=9)

    assert actions.next_cell(editor, BINDING).status == "boundary"
    assert editor.caret_offset == 9


def test_split_line_inside_quotes_inserts_line_break() -> None:
    editor = make_editor('"ab",c', caret=2)

    result = actions.split_line(editor, BINDING)

    assert result.status == "insert_text"
    assert editor.get_text() == '"a\nb",c'
    assert editor.lines_count == 1


def test_bulk_operation_actions() -> None:
    editor = make_editor(" a ,b\n,")

    actions.trim_whitespaces(editor, BINDING)
    actions.remove_blank_lines(editor, BINDING)

    assert editor.get_text() == "a,b"


def test_line_actions() -> None:
    editor = make_editor("a,b")

    actions.duplicate_line(editor, BINDING)
    actions.insert_line_above(editor, BINDING)
    assert editor.get_text() == "a,b\n,\na,b"

    actions.remove_line(editor, BINDING)
    actions.remove_column(editor, BINDING)
    assert editor.get_text() == "b\nb"

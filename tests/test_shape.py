from csv_engine.grid import Column, Line, ShapeModel


def make_shape(text: str = "a,bb,c\nddd,e,f", new_line: str = "\n") -> ShapeModel:
    return ShapeModel.build(text, new_line)


def test_build_measures_lines_columns_and_widths() -> None:
    shape = make_shape()

    assert shape.line_and_column_count() == (2, 3)
    assert shape.column_widths == (3, 2, 1)
    assert shape.version == 0


def test_build_detects_line_ending() -> None:
    shape = ShapeModel.build("a,b\r\nc,d")

    assert shape.new_line == "\r\n"
    assert shape.lines_count == 2


def test_offset_to_location_finds_line_and_column() -> None:
    shape = make_shape()

    location = shape.offset_to_location(3)

    assert location is not None
    assert location.line == Line(index=0, offset=0, length=6)
    assert location.column == Column(index=1, offset=2, width=2)


def test_offset_on_comma_belongs_to_preceding_cell() -> None:
    shape = make_shape()

    assert shape.column_index_at(1) == 0
    assert shape.column_index_at(2) == 1


def test_offset_at_row_start_belongs_to_that_row() -> None:
    location = make_shape().offset_to_location(7)

    assert location is not None
    assert location.line.index == 1
    assert location.column.index == 0


def test_offset_inside_crlf_has_no_location() -> None:
    shape = make_shape("a,b\r\nc,d", "\r\n")

    assert shape.offset_to_location(4) is None
    assert shape.column_index_at(4) == -1
    assert shape.offset_to_location(5) is not None


def test_empty_trailing_row_has_no_location() -> None:
    shape = make_shape("a,b\n")

    assert shape.offset_to_location(4) is None
    assert shape.offset_to_location(-1) is None
    assert shape.offset_to_location(99) is None


def test_location_to_offset_points_at_cell_start() -> None:
    shape = make_shape()

    assert shape.location_to_offset(1, 2) == 13
    assert shape.location_to_offset(1, 9) == 13
    assert shape.location_to_offset(0, 0) == 0


def test_refresh_returns_new_version() -> None:
    shape = make_shape()

    refreshed = shape.refresh("x,y,z")

    assert refreshed.version == shape.version + 1
    assert refreshed.lines_count == 1
    assert shape.lines_count == 2


def test_incremental_shift_matches_full_rebuild() -> None:
    shape = make_shape("a,b\nc,d")

    successor, resized = shape.invalidate_incremental(1, 2)

    expected = ShapeModel.build("axx,b\nc,d", "\n")
    assert successor.rows == expected.rows
    assert successor.text_length == expected.text_length
    assert successor.column_widths == (3, 1)
    assert resized is True
    assert successor.version == 1


def test_incremental_shift_within_widest_cell_is_not_visible() -> None:
    shape = make_shape()

    successor, resized = shape.invalidate_incremental(8, -1)

    assert resized is False
    assert successor.rows[1].commas == (2, 4)


def test_zero_delta_keeps_model() -> None:
    shape = make_shape()

    successor, resized = shape.invalidate_incremental(3, 0)

    assert successor is shape
    assert resized is False

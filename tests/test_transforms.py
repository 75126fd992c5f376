import pytest

from csv_engine.grid import scan, transforms

GRID = "a,b,c\nd,e,f\ng,h,i"
QUOTED = '"x,1",y,z\n"p\nq",r,s'


def field_counts(text: str, new_line: str = "\n") -> set[int]:
    return {row.field_count for row in scan(text, new_line).rows}


def test_insert_column_in_the_middle() -> None:
    result = transforms.insert_column("a,b,c\nd,e,f", 1, 2, 3, "\n")

    assert result == "a,,b,c\nd,,e,f"


def test_insert_column_appends_after_last_column() -> None:
    result = transforms.insert_column("a,b\nc,d", 2, 2, 2, "\n")

    assert result == "a,b,\nc,d,"


def test_insert_column_prepends() -> None:
    result = transforms.insert_column("a,b\r\nc,d", 0, 2, 2, "\r\n")

    assert result == ",a,b\r\n,c,d"


def test_insert_column_skips_quoted_commas() -> None:
    result = transforms.insert_column('"a,b",c\nd,e', 1, 2, 2, "\n")

    assert result == '"a,b",,c\nd,,e'


def test_remove_first_column() -> None:
    result = transforms.remove_column("a,b,c\nd,e,f", 0, 2, 3, "\n")

    assert result == "b,c\ne,f"


def test_remove_middle_column() -> None:
    assert transforms.remove_column("a,b,c\nd,e,f", 1, 2, 3, "\n") == "a,c\nd,f"


def test_remove_last_column_drops_preceding_comma() -> None:
    assert transforms.remove_column("a,b,c\nd,e,f", 2, 2, 3, "\n") == "a,b\nd,e"


@pytest.mark.parametrize("text", ["a", "anything,at,all", ""])
def test_remove_only_column_collapses_to_empty(text: str) -> None:
    assert transforms.remove_column(text, 0, 1, 1, "\n") == ""


def test_remove_column_with_no_lines_is_empty() -> None:
    assert transforms.remove_column("a,b", 0, 0, 2, "\n") == ""


SHAPES = [
    (GRID, "\n"),
    (QUOTED, "\n"),
    ("a,b,c\r\nd,e,f", "\r\n"),
    (",,\r\n,,", "\r\n"),
    (",,\n,,", "\n"),
    ('"x\r\ny",,z\r\n,q,', "\r\n"),
]


@pytest.mark.parametrize("text, new_line", SHAPES)
def test_column_edits_keep_rows_rectangular(text: str, new_line: str) -> None:
    grid = scan(text, new_line)
    lines, columns = grid.lines_count, grid.columns_count
    for index in range(columns + 1):
        inserted = transforms.insert_column(text, index, lines, columns, new_line)
        assert field_counts(inserted, new_line) == {columns + 1}
    for index in range(columns):
        removed = transforms.remove_column(text, index, lines, columns, new_line)
        assert field_counts(removed, new_line) == {columns - 1}


@pytest.mark.parametrize("text, new_line", SHAPES)
def test_remove_undoes_insert_column(text: str, new_line: str) -> None:
    grid = scan(text, new_line)
    lines, columns = grid.lines_count, grid.columns_count
    for index in range(columns + 1):
        inserted = transforms.insert_column(text, index, lines, columns, new_line)
        restored = transforms.remove_column(
            inserted, index, lines, columns + 1, new_line
        )
        assert restored == text


def test_insert_line_between_rows() -> None:
    assert transforms.insert_line("a,b\nc,d", 1, 2, "\n") == "a,b\n,\nc,d"


def test_insert_line_at_edges() -> None:
    assert transforms.insert_line("a,b\nc,d", 0, 2, "\n") == ",\na,b\nc,d"
    assert transforms.insert_line("a,b\nc,d", 5, 2, "\n") == "a,b\nc,d\n,"


def test_insert_line_with_text_transfer_splits_row() -> None:
    result = transforms.insert_line_with_text_transfer(
        "a,b,c\nd,e,f", 1, 3, 3, "\n"
    )

    assert result == "a,b,\n,,c\nd,e,f"
    assert field_counts(result) == {3}


def test_insert_line_with_text_transfer_at_zero_prepends_empty_row() -> None:
    result = transforms.insert_line_with_text_transfer("a,b,c", 0, 0, 3, "\n")

    assert result == ",,\na,b,c"


def test_remove_line() -> None:
    assert transforms.remove_line("a\nb\nc", 1, "\n") == "a\nc"
    assert transforms.remove_line("a\nb\nc", 2, "\n") == "a\nb"
    assert transforms.remove_line("a,b", 0, "\n") == ""


def test_remove_line_keeps_quoted_line_breaks() -> None:
    assert transforms.remove_line('"p\nq",r\ns,t', 1, "\n") == '"p\nq",r'


def test_duplicate_line() -> None:
    assert transforms.duplicate_line("a,b\nc,d", 0, "\n") == "a,b\na,b\nc,d"
    assert transforms.duplicate_line("a,b\nc,d", 1, "\n") == "a,b\nc,d\nc,d"


def test_remove_text_trims_trailing_line_endings() -> None:
    assert transforms.remove_text("abc\n\n", 1, 2, "\n") == "ac"


def test_remove_comma_separated_text_keeps_delimiters() -> None:
    assert transforms.remove_comma_separated_text("ab,cd,ef", 1, 4, "\n") == "a,,ef"
    assert transforms.remove_comma_separated_text("a,b\nc,d", 2, 3, "\n") == "a,\n,d"


def test_remove_comma_separated_text_drops_quoted_commas() -> None:
    result = transforms.remove_comma_separated_text('"a,b",c', 0, 5, "\n")

    assert result == ",c"


def test_remove_empty_lines() -> None:
    assert transforms.remove_empty_lines("a\n\nb\n", "\n") == "a\nb"
    assert transforms.remove_empty_lines("a\r\n\r\nb") == "a\r\nb"

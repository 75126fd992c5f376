"""Grid scanner, shape model, and structural text transforms."""

from . import transforms
from .scanner import (
    GridScan,
    RowShape,
    TokenKind,
    classify,
    count_structural_commas,
    is_inside_quotes,
    scan,
    split_fields,
    split_rows,
)
from .shape import Column, Line, Location, ShapeModel
from .text import COMMA, QUOTE, detect_line_ending, trim_end

__all__ = [
    "COMMA",
    "QUOTE",
    "Column",
    "GridScan",
    "Line",
    "Location",
    "RowShape",
    "ShapeModel",
    "TokenKind",
    "classify",
    "count_structural_commas",
    "detect_line_ending",
    "is_inside_quotes",
    "scan",
    "split_fields",
    "split_rows",
    "transforms",
    "trim_end",
]

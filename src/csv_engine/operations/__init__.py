"""Bulk text operations applied through the editor."""

from .base import Operation, TextOperation
from .blank_lines import RemoveBlankLinesOperation
from .registry import (
    DEFAULT_OPERATIONS,
    OperationRegistry,
    UnknownOperationError,
    load_default_operations,
)
from .whitespace import TrimWhitespacesOperation, trim_row

__all__ = [
    "DEFAULT_OPERATIONS",
    "Operation",
    "OperationRegistry",
    "RemoveBlankLinesOperation",
    "TextOperation",
    "TrimWhitespacesOperation",
    "UnknownOperationError",
    "load_default_operations",
    "trim_row",
]

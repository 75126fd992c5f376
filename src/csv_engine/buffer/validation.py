"""Argument checks shared by the buffer and the editor facade."""

from __future__ import annotations

from .sync import BufferValidationError


def ensure_text(text: str | None) -> str:
    if text is None:
        raise BufferValidationError("text cannot be None")
    return text


def ensure_offset(text: str, offset: int) -> int:
    if offset < 0 or offset > len(text):
        raise BufferValidationError("Offset out of range", offset=offset)
    return offset


def ensure_range(text: str, offset: int, length: int) -> tuple[int, int]:
    ensure_offset(text, offset)
    if length < 0 or offset + length > len(text):
        raise BufferValidationError("Range out of bounds", offset=offset)
    return offset, length

"""Column-scoped completion candidates."""

from __future__ import annotations

from typing import List, Optional

from csv_engine.grid import ShapeModel

_TRIM = ' ",'


def completion_candidates(
    text: str,
    shape: ShapeModel,
    column_index: int,
    prefix: str,
    *,
    limit: int = 20,
    skip_line: Optional[int] = None,
) -> List[str]:
    """Distinct values already present in ``column_index`` that start with ``prefix``.

    Matching ignores case and surrounding quotes; order is first appearance.
    """

    if column_index < 0 or not prefix.strip():
        return []

    needle = prefix.casefold()
    seen: set[str] = set()
    candidates: List[str] = []
    for line_index, row in enumerate(shape.rows):
        if line_index == skip_line or column_index >= row.field_count:
            continue
        start = shape.location_to_offset(line_index, column_index)
        stop = row.offset + (
            row.commas[column_index] if column_index < len(row.commas) else row.length
        )
        value = text[start:stop].strip(_TRIM)
        if not value or value in seen or not value.casefold().startswith(needle):
            continue
        seen.add(value)
        candidates.append(value)
        if len(candidates) >= limit:
            break
    return candidates

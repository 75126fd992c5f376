"""Editor facade, its notifications, and the debounced refresh."""

from .completion import completion_candidates
from .events import (
    CARET_LOCATION_CHANGED,
    COLUMNS_RESIZED,
    TEXT_CHANGED,
    EventBus,
    TextChanged,
)
from .instance import CsvEditor, GridIndexError
from .refresh import RefreshScheduler

__all__ = [
    "CARET_LOCATION_CHANGED",
    "COLUMNS_RESIZED",
    "TEXT_CHANGED",
    "CsvEditor",
    "EventBus",
    "GridIndexError",
    "RefreshScheduler",
    "TextChanged",
    "completion_candidates",
]

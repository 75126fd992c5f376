"""Editing state machine and the dirty counter it drives.

The counter moves by one per buffer mutation: up while editing or redoing,
down while undoing, unchanged while loading. The buffer is clean exactly
when the counter is zero.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from enum import Enum
from typing import Dict, FrozenSet, Optional

from csv_engine.runtime import telemetry


class EditingState(str, Enum):
    NONE = "none"
    EDITING = "editing"
    UNDOING = "undoing"
    REDOING = "redoing"


_COUNTER_STEP: Dict[EditingState, int] = {
    EditingState.NONE: 0,
    EditingState.EDITING: 1,
    EditingState.UNDOING: -1,
    EditingState.REDOING: 1,
}

_TRANSITIONS: Dict[EditingState, FrozenSet[EditingState]] = {
    EditingState.NONE: frozenset({EditingState.EDITING}),
    EditingState.EDITING: frozenset(
        {EditingState.UNDOING, EditingState.REDOING, EditingState.NONE}
    ),
    EditingState.UNDOING: frozenset({EditingState.EDITING}),
    EditingState.REDOING: frozenset({EditingState.EDITING}),
}


class InvalidTransitionError(RuntimeError):
    def __init__(self, source: EditingState, target: EditingState) -> None:
        super().__init__(
            f"Cannot switch editing state from '{source.value}' to '{target.value}'"
        )
        self.source = source
        self.target = target


class EditingStateMachine:
    def __init__(self) -> None:
        self._state = EditingState.NONE
        self._counter = 0
        self._suppress_depth = 0

    @property
    def state(self) -> EditingState:
        return self._state

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def is_dirty(self) -> bool:
        return self._counter != 0

    @property
    def refresh_suppressed(self) -> bool:
        """True while a guard asked listeners to skip incremental refreshes."""

        return self._suppress_depth > 0

    def transition(self, target: EditingState) -> None:
        if target is self._state:
            return
        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, target)
        source = self._state
        self._state = target
        telemetry.record_event(
            "editing.transition",
            level="debug",
            data={"from": source.value, "to": target.value},
        )

    def begin_editing(self) -> None:
        self.transition(EditingState.EDITING)

    def record_change(self) -> int:
        self._counter += _COUNTER_STEP[self._state]
        return self._counter

    def reset_dirty(self) -> None:
        self._counter = 0
        telemetry.record_event("editing.reset_dirty", level="debug")

    def loading(self) -> "EditModeGuard":
        """Bulk load: mutations are not counted; ends in ``EDITING``."""

        return EditModeGuard(
            self, EditingState.NONE, release_to=EditingState.EDITING
        )

    def undoing(self) -> "EditModeGuard":
        return EditModeGuard(self, EditingState.UNDOING)

    def redoing(self) -> "EditModeGuard":
        return EditModeGuard(self, EditingState.REDOING)

    def custom_update(self) -> "EditModeGuard":
        """Programmatic full replace; keeps the state, suppresses refreshes."""

        return EditModeGuard(self, None)


class EditModeGuard(AbstractContextManager["EditModeGuard"]):
    """Switches the machine into a mode on enter and restores it on exit.

    Release happens on every exit path, including exceptions, so neither the
    state nor the refresh suppression can leak.
    """

    def __init__(
        self,
        machine: EditingStateMachine,
        state: Optional[EditingState],
        *,
        release_to: Optional[EditingState] = None,
    ) -> None:
        self.machine = machine
        self.state = state
        self.release_to = release_to
        self._previous: Optional[EditingState] = None
        self._active = False

    def __enter__(self) -> "EditModeGuard":
        self._previous = self.machine.state
        if self.state is not None:
            self.machine.transition(self.state)
        self.machine._suppress_depth += 1
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self._active:
            return False
        self._active = False
        self.machine._suppress_depth -= 1
        target = self.release_to or self._previous
        if target is not None:
            self.machine.transition(target)
        return False


__all__ = [
    "EditModeGuard",
    "EditingState",
    "EditingStateMachine",
    "InvalidTransitionError",
]

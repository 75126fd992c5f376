import pytest

from csv_engine.buffer import EditingState, EditingStateMachine, InvalidTransitionError


def make_machine(*, editing: bool = True) -> EditingStateMachine:
    machine = EditingStateMachine()
    if editing:
        machine.begin_editing()
    return machine


def test_starts_clean_in_none() -> None:
    machine = make_machine(editing=False)

    assert machine.state is EditingState.NONE
    assert machine.is_dirty is False


def test_changes_in_none_are_ignored() -> None:
    machine = make_machine(editing=False)

    machine.record_change()

    assert machine.counter == 0


def test_invalid_transition_raises() -> None:
    machine = make_machine(editing=False)

    with pytest.raises(InvalidTransitionError) as excinfo:
        machine.transition(EditingState.UNDOING)

    assert excinfo.value.source is EditingState.NONE
    assert excinfo.value.target is EditingState.UNDOING


def test_undoing_guard_decrements_and_restores_state() -> None:
    machine = make_machine()
    machine.record_change()

    with machine.undoing():
        assert machine.state is EditingState.UNDOING
        assert machine.refresh_suppressed is True
        machine.record_change()

    assert machine.state is EditingState.EDITING
    assert machine.refresh_suppressed is False
    assert machine.is_dirty is False


def test_guard_releases_on_exception() -> None:
    machine = make_machine()

    with pytest.raises(RuntimeError):
        with machine.redoing():
            raise RuntimeError("boom")

    assert machine.state is EditingState.EDITING
    assert machine.refresh_suppressed is False


def test_loading_ignores_changes_and_ends_editing() -> None:
    machine = make_machine(editing=False)

    with machine.loading():
        machine.record_change()
        machine.record_change()

    assert machine.counter == 0
    assert machine.state is EditingState.EDITING


def test_custom_update_keeps_state_and_nests() -> None:
    machine = make_machine()

    with machine.custom_update():
        with machine.custom_update():
            assert machine.refresh_suppressed is True
        assert machine.refresh_suppressed is True
        machine.record_change()

    assert machine.refresh_suppressed is False
    assert machine.state is EditingState.EDITING
    assert machine.counter == 1


def test_reset_dirty() -> None:
    machine = make_machine()
    machine.record_change()

    machine.reset_dirty()

    assert machine.is_dirty is False


@pytest.mark.parametrize("edits", [1, 3, 7])
def test_undone_and_redone_edits_restore_counter(edits: int) -> None:
    machine = make_machine()
    for _ in range(edits):
        machine.record_change()
    after_edits = machine.counter

    for _ in range(edits):
        with machine.undoing():
            machine.record_change()
    assert machine.counter == 0

    with machine.redoing():
        machine.record_change()
    for _ in range(edits - 1):
        with machine.redoing():
            machine.record_change()

    assert machine.counter == after_edits


@pytest.mark.parametrize("guard", ["loading", "undoing", "redoing", "custom_update"])
def test_every_guard_suppresses_refresh(guard: str) -> None:
    machine = make_machine()

    with getattr(machine, guard)():
        assert machine.refresh_suppressed is True

    assert machine.refresh_suppressed is False

"""Built-in actions and the key bindings that reach them."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from csv_engine.actions import editing, grid, navigation

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

GRID_SCOPE = "grid"

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("grid.insert_column", grid.insert_column, "Insert a column after the caret"),
    ActionRef("grid.remove_column", grid.remove_column, "Remove the caret's column"),
    ActionRef("grid.insert_line_below", grid.insert_line_below, "Insert an empty row below"),
    ActionRef("grid.insert_line_above", grid.insert_line_above, "Insert an empty row above"),
    ActionRef("grid.split_line", grid.split_line, "Break the row at the caret"),
    ActionRef("grid.remove_line", grid.remove_line, "Remove the caret's row"),
    ActionRef("grid.duplicate_line", grid.duplicate_line, "Duplicate the caret's row"),
    ActionRef("edit.delete_next", editing.delete_next, "Delete the next character"),
    ActionRef("edit.delete_previous", editing.delete_previous, "Delete the previous character"),
    ActionRef("edit.copy", editing.copy_selection, "Copy the selection"),
    ActionRef("edit.cut", editing.cut_selection, "Cut the selection"),
    ActionRef("edit.paste", editing.paste_clipboard, "Paste without delimiters"),
    ActionRef("edit.undo", editing.undo, "Undo"),
    ActionRef("edit.redo", editing.redo, "Redo"),
    ActionRef("ops.trim_whitespaces", editing.trim_whitespaces, "Trim every cell"),
    ActionRef("ops.remove_blank_lines", editing.remove_blank_lines, "Drop empty rows"),
    ActionRef("nav.left", navigation.caret_left, "Move left"),
    ActionRef("nav.right", navigation.caret_right, "Move right"),
    ActionRef("nav.up", navigation.caret_up, "Move up"),
    ActionRef("nav.down", navigation.caret_down, "Move down"),
    ActionRef("nav.next_cell", navigation.next_cell, "Jump to the next cell"),
    ActionRef("nav.previous_cell", navigation.previous_cell, "Jump to the previous cell"),
)


def _bind(
    key: str, action_id: str, *, when: tuple[str, ...] = (), binding_id: str | None = None
) -> Binding:
    stroke = KeyStroke.parse(key)
    return Binding(
        id=binding_id or f"{GRID_SCOPE}.{action_id}",
        scope=GRID_SCOPE,
        stroke=stroke,
        action_id=action_id,
        when=tuple(when),
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bind("alt+i", "grid.insert_column"),
    _bind("alt+x", "grid.remove_column"),
    _bind("ctrl+n", "grid.insert_line_below"),
    _bind("alt+n", "grid.insert_line_above"),
    _bind("enter", "grid.split_line"),
    _bind("ctrl+k", "grid.remove_line"),
    _bind("ctrl+d", "grid.duplicate_line"),
    _bind("delete", "edit.delete_next"),
    _bind("backspace", "edit.delete_previous"),
    _bind("ctrl+c", "edit.copy", when=("has_selection",)),
    _bind("ctrl+x", "edit.cut", when=("has_selection",)),
    _bind("ctrl+v", "edit.paste"),
    _bind("ctrl+z", "edit.undo"),
    _bind("ctrl+y", "edit.redo"),
    _bind("alt+t", "ops.trim_whitespaces"),
    _bind("alt+b", "ops.remove_blank_lines"),
    _bind("left", "nav.left"),
    _bind("right", "nav.right"),
    _bind("up", "nav.up"),
    _bind("down", "nav.down"),
    _bind("tab", "nav.next_cell"),
    _bind("shift+tab", "nav.previous_cell"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_scope_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> KeymapRegistry:
    """Register built-in actions and bindings; returns ``registry``."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    registered: set[str] = set()
    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)
        registered.add(action.id)

    for binding in DEFAULT_BINDINGS:
        if binding.action_id not in registered:
            continue
        if not _selected(binding.id, allowed_bindings):
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)

    for scope, bindings in (per_scope_overrides or {}).items():
        for binding in bindings:
            if binding.scope != scope:
                raise ValueError(
                    f"Override binding '{binding.id}' must target scope '{scope}'"
                )
            registry.register_binding(binding, replace=True)

    return registry


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    return include_set, set(exclude or ())


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = ["GRID_SCOPE", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "load_default_keymaps"]

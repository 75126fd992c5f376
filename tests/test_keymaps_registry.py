import pytest

from csv_engine.keymaps import (
    GRID_SCOPE,
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "grid.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    scope: str = GRID_SCOPE,
    key: str = "ctrl+k",
    action_id: str = "grid.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        scope=scope,
        stroke=KeyStroke.parse(key),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def make_registry() -> KeymapRegistry:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    return registry


@pytest.mark.parametrize(
    ("text", "token"),
    [
        ("ctrl+k", "ctrl+k"),
        ("shift+ctrl+K", "ctrl+shift+K"),
        ("Delete", "delete"),
        ("+", "+"),
        ("ctrl++", "ctrl++"),
    ],
)
def test_keystroke_parse_normalizes_tokens(text: str, token: str) -> None:
    assert KeyStroke.parse(text).token == token


def test_keystroke_rejects_unknown_modifier() -> None:
    with pytest.raises(ValueError):
        KeyStroke.parse("hyper+k")


def test_register_binding_success() -> None:
    registry = make_registry()
    binding = make_binding(binding_id="grid.k")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(scope=GRID_SCOPE)) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="grid.k"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="grid.k.duplicate"))

    assert [b.id for b in excinfo.value.conflicts] == ["grid.k"]


def test_register_binding_unknown_action() -> None:
    registry = make_registry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="x", action_id="missing"))


def test_non_overlapping_when_clauses_coexist() -> None:
    registry = make_registry()

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="selected", when=(WhenClause("has_selection"),))
    )
    registry.register_binding(
        make_binding(binding_id="unselected", when=(WhenClause.parse("!has_selection"),))
    )

    assert registry.stats().binding_count == 3


def test_lookup_prefers_matching_specific_binding() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="selected", when=(WhenClause("has_selection"),))
    )

    assert registry.lookup(GRID_SCOPE, "ctrl+k", {"has_selection": True}).id == "selected"
    assert registry.lookup(GRID_SCOPE, "ctrl+k", {}).id == "default"
    assert registry.lookup(GRID_SCOPE, "ctrl+j", {}) is None
    assert registry.lookup("other", "ctrl+k", {}) is None


def test_lookup_honours_priority() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="low"))
    registry.register_binding(make_binding(binding_id="high", priority=5))

    assert registry.lookup(GRID_SCOPE, KeyStroke("k", ("ctrl",))).id == "high"


def test_register_binding_with_replace() -> None:
    registry = make_registry()
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", key="ctrl+j")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.lookup(GRID_SCOPE, "ctrl+k") is None


def test_update_binding_changes_stroke() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", stroke=KeyStroke.parse("alt+d"), description="delete row"
    )

    assert updated.token == "alt+d"
    assert updated.description == "delete row"
    assert registry.lookup(GRID_SCOPE, "alt+d") == updated
    assert registry.revision() == before + 1


def test_update_binding_conflict_keeps_original() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="k"))
    registry.register_binding(make_binding(binding_id="j", key="ctrl+j"))

    with pytest.raises(KeymapConflictError):
        registry.update_binding("j", stroke=KeyStroke.parse("ctrl+k"))

    assert registry.lookup(GRID_SCOPE, "ctrl+j").id == "j"


def test_unregister_binding() -> None:
    registry = make_registry()
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.stats().scopes == ()
    assert registry.unregister_binding("binding") is None


def test_load_default_keymaps() -> None:
    registry = load_default_keymaps(KeymapRegistry())

    binding = registry.lookup(GRID_SCOPE, "ctrl+z")
    assert binding is not None
    assert binding.action_id == "edit.undo"
    assert registry.lookup(GRID_SCOPE, "ctrl+c", {"has_selection": False}) is None


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("edit.undo", "edit.redo"),
        exclude_bindings=("grid.edit.redo",),
    )

    assert registry.stats().action_count == 2
    assert registry.stats().binding_count == 1


def test_load_default_keymaps_per_scope_override() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="grid.edit.undo",
        scope=GRID_SCOPE,
        stroke=KeyStroke.parse("alt+u"),
        action_id="edit.undo",
    )

    load_default_keymaps(registry, per_scope_overrides={GRID_SCOPE: (custom,)})

    assert registry.get_binding("grid.edit.undo").token == "alt+u"
    assert registry.lookup(GRID_SCOPE, "ctrl+z") is None


def test_override_must_target_its_scope() -> None:
    custom = make_binding(binding_id="x", scope="dialog", action_id="edit.undo")

    with pytest.raises(ValueError):
        load_default_keymaps(KeymapRegistry(), per_scope_overrides={GRID_SCOPE: (custom,)})

"""Keymap registry holding actions and the bindings that reach them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence

from csv_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    scopes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding would shadow an existing one."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and binding metadata, indexed by scope and token."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._scope_index: Dict[str, Dict[str, set[str]]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "scope": binding.scope},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = [
                conflict
                for conflict in self.detect_conflicts(binding)
                if conflict.id != binding.id
            ]
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)
            if not replace and binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            for stale in (*conflicts, self._bindings.get(binding.id)):
                if stale is not None:
                    self._unindex(stale)
                    self._bindings.pop(stale.id, None)

            self._bindings[binding.id] = binding
            self._index(binding)
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ):
            binding = self._bindings.pop(binding_id, None)
            if not binding:
                return None
            self._unindex(binding)
            self._revision += 1
            return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        with span(
            "keymaps::update_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ) as handle:
            current = self.get_binding(binding_id)
            updated = replace(current, **changes)
            if updated.action_id not in self._actions:
                handle.add_metadata("missing_action", updated.action_id)
                raise KeyError(
                    f"Binding '{binding_id}' references unknown action '{updated.action_id}'"
                )

            conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
            if conflicts:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(updated, conflicts)

            self._unindex(current)
            self._bindings[binding_id] = updated
            self._index(updated)
            self._revision += 1
            return updated

    def iter_bindings(self, scope: Optional[str] = None) -> Iterator[Binding]:
        if scope is None:
            yield from self._bindings.values()
            return
        for bucket in self._scope_index.get(scope, {}).values():
            for binding_id in sorted(bucket):
                yield self._bindings[binding_id]

    def lookup(
        self,
        scope: str,
        stroke: KeyStroke | str,
        flags: Mapping[str, bool] | None = None,
    ) -> Optional[Binding]:
        """Best binding for ``stroke`` whose ``when`` clauses hold for ``flags``.

        Higher ``priority`` wins; among equals the more specific binding
        (more clauses) wins.
        """

        token = stroke.token if isinstance(stroke, KeyStroke) else KeyStroke.parse(stroke).token
        context = flags or {}
        candidates = [
            self._bindings[binding_id]
            for binding_id in self._scope_index.get(scope, {}).get(token, ())
        ]
        allowed = [binding for binding in candidates if binding.allows(context)]
        if not allowed:
            return None
        return max(allowed, key=lambda b: (b.priority, len(b.when), b.id))

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            scopes=tuple(sorted(self._scope_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        ignored = set(ignore or ())
        conflicts: list[Binding] = []
        for match_id in sorted(
            self._scope_index.get(binding.scope, {}).get(binding.token, set())
        ):
            if match_id in ignored:
                continue
            existing = self._bindings[match_id]
            if existing.priority == binding.priority and _contexts_overlap(
                binding, existing
            ):
                conflicts.append(existing)
        return conflicts

    def _index(self, binding: Binding) -> None:
        by_token = self._scope_index.setdefault(binding.scope, {})
        by_token.setdefault(binding.token, set()).add(binding.id)

    def _unindex(self, binding: Binding) -> None:
        by_token = self._scope_index.get(binding.scope)
        if not by_token:
            return
        bucket = by_token.get(binding.token)
        if not bucket:
            return
        bucket.discard(binding.id)
        if not bucket:
            by_token.pop(binding.token, None)
        if not by_token:
            self._scope_index.pop(binding.scope, None)


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """Two bindings overlap when some flag assignment satisfies both equally."""

    left_map = left.when_map
    right_map = right.when_map
    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False
    return dict(left_map) == dict(right_map)


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]

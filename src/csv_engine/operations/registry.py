"""Name-addressable registry of editor operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Type

from csv_engine.runtime.telemetry import span

from .base import Operation
from .blank_lines import RemoveBlankLinesOperation
from .whitespace import TrimWhitespacesOperation

if TYPE_CHECKING:  # pragma: no cover
    from csv_engine.editor import CsvEditor

DEFAULT_OPERATIONS: tuple[Type[Operation], ...] = (
    TrimWhitespacesOperation,
    RemoveBlankLinesOperation,
)


class UnknownOperationError(KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Operation '{self.name}' is not registered"


class OperationRegistry:
    def __init__(self, *, logger_name: str | None = None) -> None:
        self._operations: Dict[str, Type[Operation]] = {}
        self._logger_name = logger_name

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._operations))

    def register(
        self, operation: Type[Operation], *, replace: bool = False
    ) -> Type[Operation]:
        with span(
            "operations::register",
            logger_name=self._logger_name,
            component="operations",
            metadata={"operation": operation.name},
        ):
            if not operation.name or operation.name == Operation.name:
                raise ValueError(f"{operation.__name__} must define a unique name")
            if not replace and operation.name in self._operations:
                raise ValueError(f"Operation '{operation.name}' already registered")
            self._operations[operation.name] = operation
            return operation

    def unregister(self, name: str) -> Optional[Type[Operation]]:
        return self._operations.pop(name, None)

    def get(self, name: str) -> Type[Operation]:
        try:
            return self._operations[name]
        except KeyError:
            raise UnknownOperationError(name) from None

    def create(self, name: str, editor: "CsvEditor") -> Operation:
        return self.get(name)(editor)


def load_default_operations(
    registry: OperationRegistry,
    *,
    replace: bool = False,
    include: Sequence[str] | None = None,
    extra: Iterable[Type[Operation]] | None = None,
) -> OperationRegistry:
    for operation in DEFAULT_OPERATIONS:
        if include is not None and operation.name not in include:
            continue
        registry.register(operation, replace=replace)
    for operation in extra or ():
        registry.register(operation, replace=replace)
    return registry


__all__ = [
    "DEFAULT_OPERATIONS",
    "OperationRegistry",
    "UnknownOperationError",
    "load_default_operations",
]

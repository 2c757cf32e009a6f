"""Registry key and entry value types.

`MappingKey` identifies a mapping by (source type, target type, name) and is
the hash key of the registry table. `MappingEntry` pairs a key with the
callable captured at registration time and its `CallableShape`, which is
classified once so the dispatcher never has to inspect signatures per call.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

__all__ = ["CallableShape", "MappingEntry", "MappingKey", "type_name"]


def type_name(tp: type) -> str:
    """Return the dotted name of *tp* for messages and log lines."""
    module = getattr(tp, "__module__", None)
    qualname = getattr(tp, "__qualname__", None) or repr(tp)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


@dataclass(frozen=True)
class MappingKey:
    source_type: type
    target_type: type
    mapping_name: str = ""

    def __str__(self) -> str:
        text = f"{type_name(self.source_type)} -> {type_name(self.target_type)}"
        if self.mapping_name:
            text += f" ('{self.mapping_name}')"
        return text


class CallableShape(Enum):
    """The four accepted mapping signatures."""

    MUTATES_TARGET = "(source, target) -> None"
    MUTATES_TARGET_WITH_CONTEXT = "(source, target, context) -> None"
    RETURNS_TARGET = "(source) -> target"
    RETURNS_TARGET_WITH_CONTEXT = "(source, context) -> target"

    @property
    def requires_context(self) -> bool:
        return self in (
            CallableShape.MUTATES_TARGET_WITH_CONTEXT,
            CallableShape.RETURNS_TARGET_WITH_CONTEXT,
        )

    @property
    def returns_new_instance(self) -> bool:
        return self in (
            CallableShape.RETURNS_TARGET,
            CallableShape.RETURNS_TARGET_WITH_CONTEXT,
        )


@dataclass(frozen=True)
class MappingEntry:
    key: MappingKey
    func: Callable[..., Any]
    shape: CallableShape
    description: str

    @property
    def requires_context(self) -> bool:
        return self.shape.requires_context

    @property
    def returns_new_instance(self) -> bool:
        return self.shape.returns_new_instance

    def __str__(self) -> str:
        return self.description

"""Per-call state container passed to context-aware mapping callables.

This module defines the MappingContext dataclass that carries auxiliary values
through a single mapping operation. A context is created for each top-level
`map` call (or supplied by the caller) and handed by reference to every
callable that declares a `MappingContext` parameter, including nested `map`
calls made from inside a mapping.

State Fields:
    data: Ordered key → value bag of caller-supplied values
    source: Iterable currently being mapped by a bulk operation (or None)
    source_index: Position of the current element within `source` (-1 when
        not mapping a collection)

Usage Pattern:
    1. Caller builds a context (or lets the mapper create an empty one)
    2. Bulk helpers update `source` / `source_index` while iterating
    3. Mapping callables read values and may store intermediate results
    4. The context is discarded once the top-level call returns

Design Note:
    A context is owned by exactly one call chain. It is not synchronized and
    must not be shared between concurrent mapping operations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, KeysView, Mapping, Optional

__all__ = ["MappingContext"]


@dataclass
class MappingContext:
    data: Dict[str, Any] = field(default_factory=dict)
    source: Optional[Iterable[Any]] = None
    source_index: int = -1

    def __post_init__(self) -> None:
        # Never alias a caller-owned dict.
        self.data = dict(self.data)

    @classmethod
    def of(cls, key: str, value: Any) -> "MappingContext":
        """Build a context holding a single value."""
        return cls({key: value})

    def get(self, key: str, default: Any = None) -> Any:
        value = self.data.get(key)
        return default if value is None else value

    def contains_key(self, key: str) -> bool:
        return key in self.data

    def is_empty(self) -> bool:
        return not self.data

    def keys(self) -> KeysView[str]:
        return self.data.keys()

    def put(self, key: str, value: Any) -> "MappingContext":
        self.data[key] = value
        return self

    def put_all(self, values: Mapping[str, Any]) -> "MappingContext":
        self.data.update(values)
        return self

    def remove(self, key: str) -> "MappingContext":
        self.data.pop(key, None)
        return self

    def clear(self) -> "MappingContext":
        self.data.clear()
        return self

    def copy(self) -> "MappingContext":
        """Return a context with a shallow copy of `data` and no bulk position."""
        return MappingContext(self.data)

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

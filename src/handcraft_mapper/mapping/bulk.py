"""Collection helpers built on single-object mapping.

Each helper maps every element of an iterable to `target_type` and stores the
results in a list, a caller-supplied collection or a caller-supplied dict
(source element as key). Elements are mapped in iteration order.

Entry reuse:
    By default every element is resolved on its own, so a polymorphic input
    (instances of several subclasses) picks the right mapping per element.
    Thanks to self-training this costs one dict lookup per element after the
    first occurrence of each subtype. When the caller knows the input is
    homogeneous it can put `HINT_REUSE_MAPPING` into the context; the entry is
    then resolved once, from the first non-None element, and reused.

While iterating, `context.source` and `context.source_index` describe the
element being mapped; previous values are restored when the helper returns.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional, Set

from ..errors import MappingError
from .dispatcher import MappingDispatcher
from .keys import MappingEntry, MappingKey
from .mapping_context import MappingContext
from .registry import MappingRegistry

__all__ = ["BulkMapper", "HINT_REUSE_MAPPING"]

HINT_REUSE_MAPPING = "handcraft_mapper_hint:reuse_mapping"


class BulkMapper:
    def __init__(
        self,
        registry: MappingRegistry,
        dispatcher: MappingDispatcher,
        narrow: Callable[[Any], type],
    ) -> None:
        self.registry = registry
        self.dispatcher = dispatcher
        self.narrow = narrow

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def map_into(
        self,
        sources: Iterable[Any],
        target_type: type,
        collection: Any,
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> Any:
        """Add each mapped element to *collection* and return it."""
        if collection is None:
            raise MappingError("Target collection cannot be None")
        add = getattr(collection, "append", None) or getattr(collection, "add", None)
        if add is None:
            raise MappingError(
                f"Target collection {type(collection).__name__} supports neither append nor add"
            )
        for _source, result in self._iter_mapped(sources, target_type, mapping_name, context):
            add(result)
        return collection

    def map_into_dict(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping: MutableMapping[Any, Any],
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> MutableMapping[Any, Any]:
        """Store `mapping[source] = mapped` for each element and return *mapping*."""
        if mapping is None:
            raise MappingError("Target mapping cannot be None")
        for source, result in self._iter_mapped(sources, target_type, mapping_name, context):
            mapping[source] = result
        return mapping

    def map_to_array(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> List[Any]:
        """Return a new list with one mapped value per element, in input order."""
        return [
            result
            for _source, result in self._iter_mapped(sources, target_type, mapping_name, context)
        ]

    def map_to_list(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> List[Any]:
        return self.map_into(sources, target_type, [], mapping_name, context)

    def map_to_set(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> Set[Any]:
        return self.map_into(sources, target_type, set(), mapping_name, context)

    def map_to_dict(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: str = "",
        context: Optional[MappingContext] = None,
    ) -> Dict[Any, Any]:
        return self.map_into_dict(sources, target_type, {}, mapping_name, context)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _iter_mapped(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: str,
        context: Optional[MappingContext],
    ):
        if sources is None:
            raise MappingError("Source collection cannot be None")
        if target_type is None:
            raise MappingError("Target type cannot be None")
        if mapping_name is None:
            raise MappingError("Mapping name cannot be None")
        items = sources if isinstance(sources, (list, tuple)) else list(sources)
        if not items:
            return

        shared: Optional[MappingEntry] = None
        if context is not None and context.contains_key(HINT_REUSE_MAPPING):
            first = next((s for s in items if s is not None), None)
            if first is not None:
                shared = self.registry.load(
                    MappingKey(self.narrow(first), target_type, mapping_name)
                )

        saved = None if context is None else (context.source, context.source_index)
        try:
            for index, source in enumerate(items):
                if context is not None:
                    context.source = items
                    context.source_index = index
                if source is None:
                    yield source, None
                    continue
                entry = shared or self.registry.load(
                    MappingKey(self.narrow(source), target_type, mapping_name)
                )
                yield source, self.dispatcher.invoke(entry, source, None, context)
        finally:
            if saved is not None:
                context.source, context.source_index = saved

"""Public facade for object-to-object mapping.

This module provides the stable public API of the engine. `HandcraftMapper`
ties together the registry (what mappings exist), the type narrower (which
type an instance should be looked up as), the dispatcher (how an entry is
invoked) and the bulk helpers (collections). All of the resolution and
invocation logic lives in the `handcraft_mapper.mapping` package; the facade
only validates arguments, fills in defaults and builds keys.

Public API:
    map: Map one source to a target type (new instance) or onto a target instance
    allows_to_map: Check whether a mapping (or an ancestor mapping) is registered
    register / register_callable / register_provider: Feed mapping definitions
    map_into / map_into_dict / map_to_array / map_to_list / map_to_set /
        map_to_dict: Collection helpers
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional, Set

from .config import Settings, get_settings
from .discovery import load_mappings_from, scan_modules
from .errors import MappingError
from .mapping.bulk import BulkMapper
from .mapping.dispatcher import MappingDispatcher
from .mapping.keys import MappingKey
from .mapping.mapping_context import MappingContext
from .mapping.narrowing import (
    NarrowerLike,
    ProxyTypeNarrower,
    RuntimeTypeNarrower,
    as_narrow_function,
)
from .mapping.registry import MappingRegistry

__all__ = ["HandcraftMapper"]

logger = logging.getLogger(__name__)


class HandcraftMapper:
    """Maps objects using explicitly registered ("handcrafted") functions.

    Instances are safe to share between threads once providers have been
    registered. Each `map` call gets its own `MappingContext` unless the
    caller passes one.
    """

    def __init__(
        self,
        registry: Optional[MappingRegistry] = None,
        *,
        narrower: Optional[NarrowerLike] = None,
        dispatcher: Optional[MappingDispatcher] = None,
        default_mapping_name: str = "",
        enforce_mapping_context: bool = True,
    ) -> None:
        self.registry = registry if registry is not None else MappingRegistry()
        self.dispatcher = dispatcher if dispatcher is not None else MappingDispatcher()
        self.default_mapping_name = default_mapping_name
        self.enforce_mapping_context = enforce_mapping_context
        self._narrower: NarrowerLike = narrower if narrower is not None else ProxyTypeNarrower()
        self._narrow = as_narrow_function(self._narrower)
        self._bulk = BulkMapper(self.registry, self.dispatcher, self._narrow_instance)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HandcraftMapper":
        """Build a mapper configured from `Settings` and pre-load provider modules."""
        if settings is None:
            settings = get_settings()
        logging.getLogger("handcraft_mapper").setLevel(settings.LOG_LEVEL)
        mapper = cls(
            narrower=ProxyTypeNarrower() if settings.PROXY_NARROWING else RuntimeTypeNarrower(),
            default_mapping_name=settings.DEFAULT_MAPPING_NAME,
            enforce_mapping_context=settings.ENFORCE_MAPPING_CONTEXT,
        )
        keys = scan_modules(mapper.registry, settings.PROVIDER_MODULES)
        if settings.PROVIDER_MODULES:
            logger.info(
                "Registered %d mapping(s) from %d provider module(s)",
                len(keys),
                len(settings.PROVIDER_MODULES),
            )
        return mapper

    # ------------------------------------------------------------------
    # Narrowing
    # ------------------------------------------------------------------

    @property
    def narrower(self) -> NarrowerLike:
        return self._narrower

    @narrower.setter
    def narrower(self, narrower: NarrowerLike) -> None:
        self._narrow = as_narrow_function(narrower)
        self._narrower = narrower

    def _narrow_instance(self, instance: Any) -> type:
        return self._narrow(instance)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, provider: Any, method_name: str, mapping_name: str = "") -> MappingKey:
        return self.registry.register(provider, method_name, mapping_name)

    def register_callable(self, func: Callable[..., Any], mapping_name: str = "") -> MappingKey:
        return self.registry.register_callable(func, mapping_name)

    def register_provider(self, provider: Any) -> List[MappingKey]:
        """Register every `@mapping` method of *provider*."""
        return load_mappings_from(self.registry, provider)

    # ------------------------------------------------------------------
    # Single-object mapping
    # ------------------------------------------------------------------

    def map(
        self,
        source: Any,
        target: Any,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> Any:
        """Map *source* to *target*.

        Args:
            source: Object to read from. With a target *type*, None maps to None
                without consulting the registry; with a target *instance*, None
                is rejected.
            target: Either a class (a new instance is produced) or an instance
                (it is populated in place and returned).
            mapping_name: Named mapping to use; defaults to the mapper's default.
            context: Context handed to context-aware mappings; a fresh one is
                created when omitted (unless context enforcement is disabled).

        Raises:
            MappingDefinitionNotFoundError: no applicable mapping is registered.
            MappingError: invalid arguments or the mapping itself failed.
        """
        if target is None:
            raise MappingError("Target cannot be None")
        name = self._name(mapping_name)
        if isinstance(target, type):
            if source is None:
                return None
            key = MappingKey(self._narrow(source), target, name)
            return self.dispatcher.invoke(self.registry.load(key), source, None, self._context(context))
        if source is None:
            raise MappingError("Source object cannot be None")
        key = MappingKey(self._narrow(source), self._narrow(target), name)
        return self.dispatcher.invoke(self.registry.load(key), source, target, self._context(context))

    def allows_to_map(
        self, source_type: type, target_type: type, mapping_name: Optional[str] = None
    ) -> bool:
        return self.registry.allows_to_map(source_type, target_type, self._name(mapping_name))

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def map_into(
        self,
        sources: Iterable[Any],
        target_type: type,
        collection: Any,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> Any:
        return self._bulk.map_into(
            sources, target_type, collection, self._name(mapping_name), self._context(context)
        )

    def map_into_dict(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping: MutableMapping[Any, Any],
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> MutableMapping[Any, Any]:
        return self._bulk.map_into_dict(
            sources, target_type, mapping, self._name(mapping_name), self._context(context)
        )

    def map_to_array(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> List[Any]:
        return self._bulk.map_to_array(
            sources, target_type, self._name(mapping_name), self._context(context)
        )

    def map_to_list(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> List[Any]:
        return self._bulk.map_to_list(
            sources, target_type, self._name(mapping_name), self._context(context)
        )

    def map_to_set(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> Set[Any]:
        return self._bulk.map_to_set(
            sources, target_type, self._name(mapping_name), self._context(context)
        )

    def map_to_dict(
        self,
        sources: Iterable[Any],
        target_type: type,
        mapping_name: Optional[str] = None,
        context: Optional[MappingContext] = None,
    ) -> Dict[Any, Any]:
        return self._bulk.map_to_dict(
            sources, target_type, self._name(mapping_name), self._context(context)
        )

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def _name(self, mapping_name: Optional[str]) -> str:
        return self.default_mapping_name if mapping_name is None else mapping_name

    def _context(self, context: Optional[MappingContext]) -> Optional[MappingContext]:
        if context is not None:
            return context
        return MappingContext() if self.enforce_mapping_context else None

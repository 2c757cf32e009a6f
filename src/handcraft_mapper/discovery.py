"""Decorator-based discovery of mapping providers.

A mapping provider is any object whose methods are marked with `@mapping`.
`load_mappings_from` registers every marked method of one provider instance;
`scan_module` / `scan_modules` additionally instantiate every class marked
with `@mapping_provider` in the given modules, which is how applications wire
their providers at startup:

    @mapping_provider
    class OrderMappings:
        @mapping
        def to_dto(self, order: Order, dto: OrderDTO) -> None:
            dto.reference = order.reference

        @mapping("summary")
        def to_summary(self, order: Order) -> OrderSummary:
            return OrderSummary(order.reference)
"""
from __future__ import annotations

import importlib
import inspect
import logging
from types import ModuleType
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union, overload

from .mapping.keys import MappingKey
from .mapping.registry import MappingRegistry

__all__ = [
    "load_mappings_from",
    "mapping",
    "mapping_provider",
    "scan_module",
    "scan_modules",
]

logger = logging.getLogger(__name__)

_MAPPING_ATTR = "__handcraft_mapping_name__"
_PROVIDER_ATTR = "__handcraft_mapping_provider__"

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


@overload
def mapping(name: F) -> F: ...


@overload
def mapping(name: str = "") -> Callable[[F], F]: ...


def mapping(name: Union[str, F] = "") -> Union[F, Callable[[F], F]]:
    """Mark a provider method as a mapping definition.

    Usable bare (`@mapping`) for the unnamed mapping or with a name
    (`@mapping("summary")`).
    """
    if callable(name):
        setattr(name, _MAPPING_ATTR, "")
        return name

    def decorator(func: F) -> F:
        setattr(func, _MAPPING_ATTR, name)
        return func

    return decorator


def mapping_provider(cls: C) -> C:
    """Mark a class so that `scan_module` instantiates and registers it."""
    setattr(cls, _PROVIDER_ATTR, True)
    return cls


def _marked_methods(provider: Any) -> Iterable[tuple[str, str]]:
    # Walk the class dicts (most derived last) so definition order is kept and
    # overridden methods are only reported once.
    seen: dict[str, str] = {}
    for klass in reversed(type(provider).__mro__):
        for attr, value in vars(klass).items():
            func = value.__func__ if isinstance(value, (staticmethod, classmethod)) else value
            name = getattr(func, _MAPPING_ATTR, None)
            if name is not None:
                seen.pop(attr, None)
                seen[attr] = name
            elif attr in seen and callable(func):
                # Overridden without the decorator: no longer a mapping.
                del seen[attr]
    return seen.items()


def load_mappings_from(registry: MappingRegistry, provider: Any) -> List[MappingKey]:
    """Register every `@mapping` method of *provider*; return the keys.

    Registration errors (illegal or duplicate definitions) propagate and stop
    the scan.
    """
    keys: List[MappingKey] = []
    for attr, name in _marked_methods(provider):
        key = registry.register(provider, attr, name)
        keys.append(key)
    if keys:
        logger.debug(
            "Loaded %d mapping(s) from %s", len(keys), type(provider).__qualname__
        )
    return keys


def scan_module(registry: MappingRegistry, module: ModuleType) -> List[MappingKey]:
    """Instantiate each `@mapping_provider` class defined in *module* and load it."""
    keys: List[MappingKey] = []
    for _name, cls in inspect.getmembers(module, inspect.isclass):
        if cls.__module__ != module.__name__ or not cls.__dict__.get(_PROVIDER_ATTR):
            continue
        keys.extend(load_mappings_from(registry, cls()))
    return keys


def scan_modules(
    registry: MappingRegistry, module_names: Optional[Iterable[str]]
) -> List[MappingKey]:
    """Import each dotted module name and scan it."""
    keys: List[MappingKey] = []
    for module_name in module_names or ():
        module = importlib.import_module(module_name)
        keys.extend(scan_module(registry, module))
    return keys

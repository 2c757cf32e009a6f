"""Type narrowing strategies used to build registry keys from instances.

Lazy-loading proxies (ORM relationship loaders, `wrapt.ObjectProxy`,
`lazy_object_proxy.Proxy`, spec'd mocks) are instances of a synthetic proxy
class while reporting the wrapped object's class through `__class__`. Keying
the registry on the proxy class would never match a registration made against
the real domain type, so the mapper asks a narrower for the type instead of
calling `type()` directly.

A narrower is anything implementing `TypeNarrower.narrow`, or a plain
callable taking the instance and returning a type.
"""
from __future__ import annotations

from typing import Any, Callable, Protocol, Union, runtime_checkable

__all__ = [
    "NarrowerLike",
    "ProxyTypeNarrower",
    "RuntimeTypeNarrower",
    "TypeNarrower",
    "as_narrow_function",
]


@runtime_checkable
class TypeNarrower(Protocol):
    def narrow(self, instance: Any) -> type:
        """Return the type to use for registry lookups of *instance*."""
        ...


NarrowerLike = Union[TypeNarrower, Callable[[Any], type]]


class RuntimeTypeNarrower:
    """Uses the instance's runtime type unchanged."""

    def narrow(self, instance: Any) -> type:
        return type(instance)

    def __repr__(self) -> str:
        return "RuntimeTypeNarrower()"


class ProxyTypeNarrower:
    """Collapses proxies to the class they advertise via `__class__`.

    Reading `__class__` never forces a lazy proxy to load its target. When the
    advertised class is not a real class (or lookup fails) the runtime type is
    used.
    """

    def narrow(self, instance: Any) -> type:
        runtime = type(instance)
        try:
            advertised = instance.__class__
        except Exception:  # proxies may raise on attribute access when detached
            return runtime
        if advertised is not runtime and isinstance(advertised, type):
            return advertised
        return runtime

    def __repr__(self) -> str:
        return "ProxyTypeNarrower()"


def as_narrow_function(narrower: NarrowerLike) -> Callable[[Any], type]:
    """Normalize a narrower object or callable into a plain function."""
    if isinstance(narrower, TypeNarrower):
        return narrower.narrow
    if callable(narrower):
        return narrower
    raise TypeError(f"Unsupported type narrower: {narrower!r}")

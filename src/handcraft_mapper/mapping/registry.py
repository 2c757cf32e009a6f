"""Mapping registry: registration, duplicate detection and resolution.

The registry owns two tables keyed by `MappingKey`:

* `_registered` holds entries added through `register` / `register_callable`.
  Keys here are unique; a second registration for the same key is rejected.
* `_trained` caches the result of an ancestor walk for a requested key that
  has no direct entry ("self-training"), so later lookups are a single dict
  read. A trained key never shadows a registered one.

Resolution order for a requested key:
    1. Direct hit in `_registered`
    2. Cached hit in `_trained`
    3. Walk the source type's MRO (excluding the type itself) and look up
       `_registered` with the same target type and mapping name; the first hit
       is installed in `_trained` for the requested key

Concurrency:
    Registration is serialized with a lock because it is a check-then-insert
    that also invalidates `_trained` (a newly registered, closer ancestor must
    win over a previously cached, more distant one). Lookups take no lock.
    Trained entries are installed with `dict.setdefault`; racing threads
    compute the same entry for the same key, so whichever insert lands first
    is equivalent to any other.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from ..errors import (
    DuplicateMappingDefinitionError,
    MappingDefinitionNotFoundError,
    MappingError,
)
from .keys import MappingEntry, MappingKey
from .signature import classify, describe_callable

__all__ = ["MappingRegistry"]

logger = logging.getLogger(__name__)


class MappingRegistry:
    def __init__(self) -> None:
        self._registered: Dict[MappingKey, MappingEntry] = {}
        self._trained: Dict[MappingKey, MappingEntry] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, provider: Any, method_name: str, mapping_name: str = "") -> MappingKey:
        """Register *provider*'s method *method_name* under *mapping_name*.

        Raises:
            IllegalMappingDefinitionError: the method is not a valid mapping.
            DuplicateMappingDefinitionError: the key is already registered.
        """
        func = getattr(provider, method_name)
        return self.register_callable(
            func,
            mapping_name,
            description=f"{type(provider).__qualname__}.{method_name}",
        )

    def register_callable(
        self,
        func: Callable[..., Any],
        mapping_name: str = "",
        *,
        description: Optional[str] = None,
    ) -> MappingKey:
        """Register a function or bound method as a mapping definition."""
        if mapping_name is None:
            raise MappingError("Mapping name cannot be None")
        description = description or describe_callable(func)
        info = classify(func, description)
        key = MappingKey(info.source_type, info.target_type, mapping_name)
        entry = MappingEntry(key=key, func=func, shape=info.shape, description=description)
        with self._lock:
            previous = self._registered.get(key)
            if previous is not None:
                raise DuplicateMappingDefinitionError(
                    f"Found duplicate mapping definitions: '{previous}' and '{entry}'",
                    key=key,
                )
            self._registered[key] = entry
            self._trained.clear()
        logger.debug("Discovered mapping %s (%s)", key, info.shape.value)
        return key

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, key: MappingKey) -> Optional[MappingEntry]:
        """Return the entry for *key*, falling back to the source type's ancestors."""
        entry = self._registered.get(key)
        if entry is not None:
            return entry
        entry = self._trained.get(key)
        if entry is not None:
            return entry
        for ancestor in key.source_type.__mro__[1:]:
            entry = self._registered.get(
                MappingKey(ancestor, key.target_type, key.mapping_name)
            )
            if entry is not None:
                cached = self._trained.setdefault(key, entry)
                logger.debug("Resolved %s via %s", key, entry.key)
                return cached
        return None

    def load(self, key: MappingKey) -> MappingEntry:
        """Like `resolve` but raises when no mapping applies."""
        entry = self.resolve(key)
        if entry is None:
            raise MappingDefinitionNotFoundError(
                f"Stumbled upon undefined mapping '{key}'", key=key
            )
        return entry

    def allows_to_map(self, source_type: type, target_type: type, mapping_name: str = "") -> bool:
        return self.resolve(MappingKey(source_type, target_type, mapping_name)) is not None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def keys(self) -> List[MappingKey]:
        """Directly registered keys in registration order."""
        return list(self._registered)

    def __contains__(self, key: object) -> bool:
        return key in self._registered

    def __len__(self) -> int:
        return len(self._registered)

    def __repr__(self) -> str:
        return f"<MappingRegistry registered={len(self._registered)} trained={len(self._trained)}>"

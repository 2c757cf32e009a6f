"""Uniform invocation of resolved mapping entries.

The dispatcher interprets an entry's `CallableShape`:

* value-returning shapes receive `(source)` or `(source, context)` and their
  return value is the result; supplying a target instance is a usage error;
* mutating shapes receive `(source, target)` or `(source, target, context)`,
  constructing the target with its zero-argument constructor when none was
  supplied, and the (now populated) target is the result.

Failures raised by the callable are wrapped in `MappingError` with the
original exception chained as `__cause__`. There are no retries.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import MappingError
from .keys import MappingEntry, type_name
from .mapping_context import MappingContext

__all__ = ["MappingDispatcher"]

logger = logging.getLogger(__name__)


class MappingDispatcher:
    def invoke(
        self,
        entry: MappingEntry,
        source: Any,
        target: Any = None,
        context: Optional[MappingContext] = None,
    ) -> Any:
        if source is None:
            raise MappingError("Source object cannot be None", key=entry.key)
        if entry.returns_new_instance:
            if target is not None:
                raise MappingError(
                    f"'{entry.key}' cannot be used for overlay mapping", key=entry.key
                )
            args = (source, context) if entry.requires_context else (source,)
            return self._call(entry, args)
        if target is None:
            target = self.new_instance(entry)
        args = (source, target, context) if entry.requires_context else (source, target)
        self._call(entry, args)
        return target

    def new_instance(self, entry: MappingEntry) -> Any:
        """Instantiate the entry's target type with no arguments."""
        target_type = entry.key.target_type
        try:
            return target_type()
        except Exception as e:
            raise MappingError(
                f"{type_name(target_type)} cannot be instantiated without arguments",
                key=entry.key,
            ) from e

    def _call(self, entry: MappingEntry, args: tuple) -> Any:
        try:
            return entry.func(*args)
        except Exception as e:
            logger.debug("Mapping %s raised %s", entry.key, type(e).__name__, exc_info=True)
            raise MappingError(f"Unable to perform '{entry.key}' mapping", key=entry.key) from e

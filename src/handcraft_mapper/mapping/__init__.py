"""Mapping registry, resolution and invocation internals.

The modules in this package are the engine behind `handcraft_mapper.mapper`:

* `keys`: `MappingKey`, `MappingEntry` and the `CallableShape` union
* `signature`: one-time classification of a callable into a shape
* `narrowing`: proxy-aware type narrowing strategies
* `registry`: registration, duplicate detection, ancestor fallback
* `dispatcher`: uniform invocation of the four shapes
* `bulk`: collection helpers
* `mapping_context`: per-call context bag
"""

from .bulk import HINT_REUSE_MAPPING, BulkMapper
from .dispatcher import MappingDispatcher
from .keys import CallableShape, MappingEntry, MappingKey
from .mapping_context import MappingContext
from .narrowing import ProxyTypeNarrower, RuntimeTypeNarrower, TypeNarrower
from .registry import MappingRegistry

__all__ = [
    "BulkMapper",
    "CallableShape",
    "HINT_REUSE_MAPPING",
    "MappingContext",
    "MappingDispatcher",
    "MappingEntry",
    "MappingKey",
    "MappingRegistry",
    "ProxyTypeNarrower",
    "RuntimeTypeNarrower",
    "TypeNarrower",
]

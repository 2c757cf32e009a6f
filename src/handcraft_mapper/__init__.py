"""Package initialization for handcraft-mapper.

Re-exports the public API so applications can write
`from handcraft_mapper import HandcraftMapper, mapping, mapping_provider`.
"""

from .config import Settings, get_settings
from .discovery import load_mappings_from, mapping, mapping_provider, scan_module, scan_modules
from .errors import (
    DuplicateMappingDefinitionError,
    IllegalMappingDefinitionError,
    MappingDefinitionNotFoundError,
    MappingError,
)
from .mapper import HandcraftMapper
from .mapping import (
    HINT_REUSE_MAPPING,
    CallableShape,
    MappingContext,
    MappingKey,
    MappingRegistry,
    ProxyTypeNarrower,
    RuntimeTypeNarrower,
    TypeNarrower,
)

__all__ = [
    "CallableShape",
    "DuplicateMappingDefinitionError",
    "HINT_REUSE_MAPPING",
    "HandcraftMapper",
    "IllegalMappingDefinitionError",
    "MappingContext",
    "MappingDefinitionNotFoundError",
    "MappingError",
    "MappingKey",
    "MappingRegistry",
    "ProxyTypeNarrower",
    "RuntimeTypeNarrower",
    "Settings",
    "TypeNarrower",
    "get_settings",
    "load_mappings_from",
    "mapping",
    "mapping_provider",
    "scan_module",
    "scan_modules",
]

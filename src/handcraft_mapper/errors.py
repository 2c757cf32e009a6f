"""Exception hierarchy for the mapping engine.

Every failure surfaced by the registry, the dispatcher or the facade derives
from `MappingError`, so callers can catch at whatever granularity they need.
Errors that concern one specific mapping carry its `MappingKey` on `.key`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .mapping.keys import MappingKey

__all__ = [
    "MappingError",
    "IllegalMappingDefinitionError",
    "DuplicateMappingDefinitionError",
    "MappingDefinitionNotFoundError",
]


class MappingError(Exception):
    """Base error; also raised for invocation failures and argument misuse."""

    def __init__(self, message: str, key: Optional["MappingKey"] = None):
        self.key = key
        super().__init__(message)


class IllegalMappingDefinitionError(MappingError):
    """Raised when a registered callable does not match an accepted shape."""


class DuplicateMappingDefinitionError(MappingError):
    """Raised when a second callable is registered under an occupied key."""


class MappingDefinitionNotFoundError(MappingError):
    """Raised when neither the requested key nor any ancestor key is registered."""

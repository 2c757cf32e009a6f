"""Classify a mapping callable into one of the accepted shapes.

Classification happens exactly once, at registration. It relies on the
callable's type hints (resolved with `typing.get_type_hints`, so string
annotations and `from __future__ import annotations` modules work):

* the first parameter annotation is the source type;
* a parameter annotated with `MappingContext` (or a subclass) is the context;
* a return annotation of `None` means the callable mutates a supplied target,
  in which case the second parameter annotation is the target type;
* any other return annotation is the target type of a value-returning mapping.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, get_type_hints

from ..errors import IllegalMappingDefinitionError
from .keys import CallableShape
from .mapping_context import MappingContext

__all__ = ["Classification", "classify", "describe_callable"]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Classification:
    source_type: type
    target_type: type
    shape: CallableShape


def describe_callable(func: Callable[..., Any]) -> str:
    """Human-readable name for *func* (owner-qualified for bound methods)."""
    qualname = getattr(func, "__qualname__", None) or repr(func)
    module = getattr(func, "__module__", None)
    return f"{module}.{qualname}" if module else qualname


def _is_context(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, MappingContext)


def _require_class(annotation: Any, what: str, description: str) -> type:
    if not isinstance(annotation, type):
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but its {what} annotation "
            f"{annotation!r} is not a class"
        )
    return annotation


def classify(func: Callable[..., Any], description: Optional[str] = None) -> Classification:
    """Determine source type, target type and shape of *func*.

    Raises:
        IllegalMappingDefinitionError: if *func* does not denote a valid mapping.
    """
    description = description or describe_callable(func)
    try:
        signature = inspect.signature(func)
        hints = get_type_hints(func)
    except (TypeError, ValueError, NameError) as e:
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but its signature cannot be inspected: {e}"
        ) from e

    params: List[inspect.Parameter] = list(signature.parameters.values())
    if any(p.kind not in _POSITIONAL for p in params):
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but takes *args, **kwargs or "
            f"keyword-only parameters"
        )
    missing = [p.name for p in params if p.name not in hints]
    if missing or "return" not in hints:
        absent = missing + ([] if "return" in hints else ["return"])
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but lacks annotations for: "
            f"{', '.join(absent)}"
        )

    annotations = [hints[p.name] for p in params]
    returns = hints["return"]
    mutates = returns is None or returns is type(None)
    upper_bound = 3 if mutates else 2
    count = len(annotations)
    with_context = count == upper_bound and _is_context(annotations[upper_bound - 1])
    without_context = count == upper_bound - 1 and not _is_context(annotations[upper_bound - 2])
    if not (with_context or without_context):
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but doesn't denote a valid mapping "
            f"(expected one of: {', '.join(s.value for s in CallableShape)})"
        )
    if any(_is_context(a) for a in annotations[: upper_bound - 1]):
        raise IllegalMappingDefinitionError(
            f"{description} is declared as a mapping but takes MappingContext as "
            f"source or target"
        )

    source_type = _require_class(annotations[0], "source", description)
    if mutates:
        target_type = _require_class(annotations[1], "target", description)
        shape = (
            CallableShape.MUTATES_TARGET_WITH_CONTEXT
            if with_context
            else CallableShape.MUTATES_TARGET
        )
    else:
        target_type = _require_class(returns, "return", description)
        shape = (
            CallableShape.RETURNS_TARGET_WITH_CONTEXT
            if with_context
            else CallableShape.RETURNS_TARGET
        )
    return Classification(source_type=source_type, target_type=target_type, shape=shape)

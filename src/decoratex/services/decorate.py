"""Decoration engine: resolve a selection, invoke, fold into a new instance.

INVARIANT: Resolution and slot checks finish before the first computing
function runs, so a rejected call never leaves partial work behind.
INVARIANT: Invocations run strictly in plan order, each one seeing the
instance produced by the previous write.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel

from decoratex.domain.records import ensure_slots, replace_slot
from decoratex.domain.registry import DecorationRegistry, registry_for
from decoratex.domain.selection import resolve
from decoratex.services.telemetry import get_current_span, trace_span, traced

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@traced
def decorate(
    instance: M | None,
    selection: Any = None,
    *,
    registry: DecorationRegistry | None = None,
) -> M | None:
    """Compute the selected decorations and return an updated copy of *instance*.

    Args:
        instance: Model instance to decorate. ``None`` is returned as-is
            without resolving or invoking anything.
        selection: Which decorations to compute, and with which params.
            See :mod:`decoratex.domain.selection` for the accepted shapes.
        registry: Registry to resolve against. Defaults to the one
            installed on ``type(instance)``.

    Raises:
        UnregisteredModelError: No registry given and none installed.
        UnknownFieldError: The selection includes an unregistered name.
        InvalidSelectionError: The selection is malformed.
        MissingSlotError: The instance cannot hold a resolved decoration.

    Exceptions from computing functions propagate unchanged.
    """
    if instance is None:
        return None

    if registry is None:
        registry = registry_for(type(instance))
    plan = resolve(registry, selection)
    ensure_slots(instance, (item.name for item in plan))

    logger.debug(
        "Decorating %s with %s",
        type(instance).__name__,
        [item.name for item in plan],
    )
    root = get_current_span()
    if root is not None:
        root.annotate("model", type(instance).__name__)
        root.annotate("fields", len(plan))

    result = instance
    for item in plan:
        with trace_span(f"decorate.{item.name}"):
            value = item.invoke(result)
        result = replace_slot(result, item.name, value)
    return result

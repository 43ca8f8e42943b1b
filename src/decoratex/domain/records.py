"""Slot access on pydantic model instances.

Decorating never mutates an instance: every write produces a copy with
one field replaced.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel

from decoratex.exceptions import MissingSlotError

M = TypeVar("M", bound=BaseModel)


def slot_names(model: type) -> frozenset[str]:
    """Field names of *model*; empty for anything that is not a pydantic model."""
    if isinstance(model, type) and issubclass(model, BaseModel):
        return frozenset(model.model_fields)
    return frozenset()


def ensure_slots(instance: BaseModel, names: Iterable[str]) -> None:
    """Raise :class:`MissingSlotError` for the first name *instance* cannot hold."""
    model = type(instance)
    available = slot_names(model)
    for name in names:
        if name not in available:
            raise MissingSlotError(name, model)


def replace_slot(instance: M, name: str, value: Any) -> M:
    """Return a copy of *instance* with *name* set to *value*.

    Works for frozen models too; the value is not re-validated.
    """
    return instance.model_copy(update={name: value})

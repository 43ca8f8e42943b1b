"""Per-model decoration registry.

Built once while a model type is being defined, then frozen. Exposes
two lookups used by selection resolution: :meth:`descriptor_of` and
:meth:`all_descriptors` (declaration order).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from enum import StrEnum
from typing import Any

from decoratex.domain.descriptors import MISSING, DecorationDescriptor, build_descriptor
from decoratex.exceptions import RegistryFrozenError, UnknownFieldError, UnregisteredModelError

logger = logging.getLogger(__name__)

REGISTRY_ATTR = "__decorations__"


class RedefinitionPolicy(StrEnum):
    """Where a redefined decoration lands in declaration order."""

    MOVE_TO_END = "move_to_end"
    IN_PLACE = "in_place"


class DecorationRegistry:
    """Ordered name -> :class:`DecorationDescriptor` mapping for one model type.

    Registering a name twice replaces the descriptor; *redefinition*
    decides whether the entry keeps its slot in declaration order or
    moves to the end.

    No computing function is ever called here.
    """

    def __init__(
        self,
        owner: type | None = None,
        *,
        redefinition: RedefinitionPolicy = RedefinitionPolicy.MOVE_TO_END,
    ) -> None:
        self.owner = owner
        self.redefinition = RedefinitionPolicy(redefinition)
        self._descriptors: dict[str, DecorationDescriptor] = {}
        self._frozen = False

    # --- registration ---

    def register(
        self,
        name: str,
        declared_type: Any,
        function: Callable[..., Any],
        default_params: Any = MISSING,
    ) -> DecorationDescriptor:
        """Validate and store a decoration.

        Raises:
            RegistryFrozenError: After :meth:`freeze`.
            InvalidFieldNameError: If *name* cannot be a model field.
            UnsupportedArityError: If *function* is not arity 1 or 2.
            MissingDefaultParamsError: Arity 2 without *default_params*.
            UnexpectedDefaultParamsError: Arity 1 with *default_params*.
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        descriptor = build_descriptor(name, declared_type, function, default_params)

        if name in self._descriptors:
            if self.redefinition is RedefinitionPolicy.MOVE_TO_END:
                del self._descriptors[name]
            logger.debug("Redefined decoration: %s (%s)", name, self.redefinition.value)
        else:
            logger.debug("Registered decoration: %s (arity %d)", name, descriptor.arity)

        self._descriptors[name] = descriptor
        return descriptor

    def inherit(self, parent: DecorationRegistry) -> None:
        """Put *parent*'s descriptors ahead of this registry's own.

        Names registered here override the parent's; *redefinition*
        decides whether they keep the parent's position or stay after
        the inherited entries.

        Raises:
            RegistryFrozenError: After :meth:`freeze`.
        """
        merged = {d.name: d for d in parent.all_descriptors()}
        if self._frozen and merged:
            raise RegistryFrozenError(next(iter(merged)))
        for name, descriptor in self._descriptors.items():
            if name in merged and self.redefinition is RedefinitionPolicy.MOVE_TO_END:
                del merged[name]
            merged[name] = descriptor
        self._descriptors = merged
        logger.debug("Inherited decorations: %s", ", ".join(parent.names()))

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --- lookups ---

    def descriptor_of(self, name: str) -> DecorationDescriptor:
        """Return the descriptor for *name*.

        Raises:
            UnknownFieldError: If *name* was never registered.
        """
        try:
            return self._descriptors[name]
        except (KeyError, TypeError):
            raise UnknownFieldError(str(name), self.owner) from None

    def get(self, name: str) -> DecorationDescriptor | None:
        return self._descriptors.get(name)

    def all_descriptors(self) -> tuple[DecorationDescriptor, ...]:
        """All descriptors in declaration order."""
        return tuple(self._descriptors.values())

    def names(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[DecorationDescriptor]:
        return iter(self.all_descriptors())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        owner = self.owner.__name__ if self.owner is not None else None
        return f"DecorationRegistry(owner={owner}, names={list(self._descriptors)})"


def registry_for(model: type) -> DecorationRegistry:
    """Return the registry installed on *model*.

    Raises:
        UnregisteredModelError: If *model* has no decorations installed.
    """
    registry = getattr(model, REGISTRY_ATTR, None)
    if not isinstance(registry, DecorationRegistry):
        raise UnregisteredModelError(model)
    return registry

"""Selection expressions and their resolution against a registry.

Accepted shapes::

    None                                  # every decoration, declaration order
    "name"                                # just one
    ["a", ("b", params), {"c": params}]   # ordered inclusion, optional overrides
    {"a": params, "b": params}            # ordered inclusion with overrides
    exclude("a", "b") / {"except": "a"}   # everything but the named ones

Resolution is complete before anything is invoked: an unknown included
name or a malformed element fails the whole call up front.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from decoratex.domain.descriptors import DecorationDescriptor
from decoratex.domain.registry import DecorationRegistry
from decoratex.exceptions import InvalidSelectionError

logger = logging.getLogger(__name__)

EXCEPT_KEY = "except"


@dataclass(frozen=True)
class Exclude:
    """Select every decoration except *names*."""

    names: tuple[str, ...]


def exclude(*names: str | Iterable[str]) -> Exclude:
    """Build an :class:`Exclude` from names or iterables of names.

    ``exclude("a", "b")`` and ``exclude(["a", "b"])`` are equivalent.
    """
    flat: list[str] = []
    for item in names:
        flat.extend(_exclusion_names(item, names))
    return Exclude(tuple(flat))


@dataclass(frozen=True)
class ResolvedDecoration:
    """One planned invocation: a descriptor and its effective params."""

    descriptor: DecorationDescriptor
    params: Any = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    def invoke(self, instance: Any) -> Any:
        return self.descriptor.computation.invoke(instance, self.params)


def resolve(registry: DecorationRegistry, selection: Any = None) -> list[ResolvedDecoration]:
    """Turn *selection* into an ordered invocation plan.

    Raises:
        UnknownFieldError: An included name is not registered.
        InvalidSelectionError: The selection shape is not understood, or
            params were given for a decoration that takes none.
    """
    if selection is None:
        return [_with_defaults(d) for d in registry.all_descriptors()]

    if isinstance(selection, Exclude):
        return _resolve_exclusion(registry, selection.names)

    if isinstance(selection, str):
        return [_with_defaults(registry.descriptor_of(selection))]

    if isinstance(selection, Mapping):
        if EXCEPT_KEY in selection:
            if len(selection) != 1:
                raise InvalidSelectionError(
                    selection, f"'{EXCEPT_KEY}' cannot be combined with other entries"
                )
            names = _exclusion_names(selection[EXCEPT_KEY], selection)
            return _resolve_exclusion(registry, names)
        return [
            _with_params(registry, name, params, selection)
            for name, params in selection.items()
        ]

    if isinstance(selection, list | tuple):
        return _resolve_sequence(registry, selection)

    raise InvalidSelectionError(
        selection, "expected a name, a list, a mapping or exclude(...)"
    )


def _resolve_sequence(
    registry: DecorationRegistry, selection: list[Any] | tuple[Any, ...]
) -> list[ResolvedDecoration]:
    plan: list[ResolvedDecoration] = []
    for element in selection:
        if isinstance(element, str):
            plan.append(_with_defaults(registry.descriptor_of(element)))
        elif isinstance(element, tuple) and len(element) == 2:
            name, params = element
            plan.append(_with_params(registry, name, params, selection))
        elif isinstance(element, Mapping) and EXCEPT_KEY not in element:
            plan.extend(
                _with_params(registry, name, params, selection)
                for name, params in element.items()
            )
        else:
            raise InvalidSelectionError(
                selection, f"unsupported element {element!r}; use a name or (name, params)"
            )
    return plan


def _resolve_exclusion(
    registry: DecorationRegistry, names: tuple[str, ...]
) -> list[ResolvedDecoration]:
    excluded = set(names)
    ignored = sorted(excluded.difference(registry.names()))
    if ignored:
        logger.debug("Ignoring unknown excluded decorations: %s", ignored)
    return [
        _with_defaults(d) for d in registry.all_descriptors() if d.name not in excluded
    ]


def _exclusion_names(value: Any, selection: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        names = tuple(value)
        if all(isinstance(n, str) for n in names):
            return names
    raise InvalidSelectionError(selection, "excluded fields must be names")


def _with_defaults(descriptor: DecorationDescriptor) -> ResolvedDecoration:
    return ResolvedDecoration(descriptor, descriptor.default_params)


def _with_params(
    registry: DecorationRegistry, name: Any, params: Any, selection: Any
) -> ResolvedDecoration:
    if not isinstance(name, str):
        raise InvalidSelectionError(selection, f"field names must be strings, got {name!r}")
    descriptor = registry.descriptor_of(name)
    if not descriptor.accepts_params:
        raise InvalidSelectionError(selection, f"'{name}' takes no params")
    return ResolvedDecoration(descriptor, params)

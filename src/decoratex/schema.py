"""Declaring decorations on pydantic models.

Usage::

    @decorations(
        decorate_field("happy_comments", int, count_happy),
        decorate_field("censored_body", str, censor, {"pattern": "frack", "replace": "*"}),
        decorate_field("shout", str, "shout_title"),  # method on the model
    )
    class Post(DecoratedModel):
        title: str
        body: str

        def shout_title(self) -> str:
            return self.title.upper()

    post = Post(title="hi", body="...").decorate(["happy_comments", "shout"])

Each decoration becomes a nullable field (``Optional[T] = None``) on a
subclass built with :func:`pydantic.create_model`; the frozen registry is
attached to it as ``__decorations__``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Self, TypeVar

from pydantic import BaseModel, create_model

from decoratex.domain.descriptors import MISSING, DecorationDescriptor
from decoratex.domain.registry import (
    REGISTRY_ATTR,
    DecorationRegistry,
    RedefinitionPolicy,
    registry_for,
)
from decoratex.exceptions import ConfigError, FieldCollisionError
from decoratex.runtime import active_settings
from decoratex.services.decorate import decorate as _decorate

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FieldDecoration:
    """A decoration as written in a model declaration, before registration."""

    name: str
    declared_type: Any
    function: Callable[..., Any] | str
    default_params: Any = MISSING


def decorate_field(
    name: str,
    declared_type: Any,
    function: Callable[..., Any] | str,
    default_params: Any = MISSING,
) -> FieldDecoration:
    """Declare one decoration.

    Args:
        name: Field name the computed value is stored under.
        declared_type: Type of the value; the field is declared as
            ``Optional[declared_type]``.
        function: ``f(instance)`` or ``f(instance, params)``, or the name
            of such a callable on the model class.
        default_params: Required for two-argument functions, forbidden
            for one-argument functions.
    """
    return FieldDecoration(name, declared_type, function, default_params)


def decorations(
    *fields: FieldDecoration,
    redefinition: RedefinitionPolicy | None = None,
) -> Callable[[type[M]], type[M]]:
    """Class decorator installing *fields* on a pydantic model.

    Registration errors surface here, while the class is being defined.
    """

    def install(model: type[M]) -> type[M]:
        _require_model(model)
        policy = redefinition or active_settings().registry.redefinition
        registry = DecorationRegistry(redefinition=policy)
        for declared in fields:
            registry.register(
                declared.name,
                declared.declared_type,
                _resolve_function(model, declared.function),
                declared.default_params,
            )
        return install_decorations(model, registry)

    return install


def install_decorations(model: type[M], registry: DecorationRegistry) -> type[M]:
    """Declare one nullable slot per descriptor and attach *registry*.

    Slots are declared exactly once each, in registry order. When *model*
    already carries decorations from a base class, those descriptors are
    inherited first and their slots are reused. The registry is frozen
    afterwards.
    """
    _require_model(model)
    parent = getattr(model, REGISTRY_ATTR, None)
    if not isinstance(parent, DecorationRegistry):
        parent = None
    if parent is not None:
        registry.inherit(parent)

    declared = [
        d for d in registry.all_descriptors() if parent is None or parent.get(d.name) is not d
    ]
    inherited = set(parent.names()) if parent is not None else set()
    collisions = {d.name for d in declared} & set(model.model_fields) - inherited
    if collisions:
        raise FieldCollisionError(model, collisions)

    slots: dict[str, Any] = {
        d.name: (Optional[d.declared_type], None)  # noqa: UP045
        for d in declared
    }
    decorated = create_model(
        model.__name__,
        __base__=model,
        __module__=model.__module__,
        __doc__=model.__doc__,
        **slots,
    )
    decorated.__qualname__ = model.__qualname__

    registry.owner = decorated
    registry.freeze()
    setattr(decorated, REGISTRY_ATTR, registry)
    return decorated


class DecoratedModel(BaseModel):
    """Base model with decoration helpers bound to the instance."""

    __decorations__: ClassVar[DecorationRegistry | None] = None

    def decorate(self, selection: Any = None) -> Self:
        """Return a copy of this instance with the selected decorations computed."""
        return _decorate(self, selection)

    @classmethod
    def decoration_registry(cls) -> DecorationRegistry:
        return registry_for(cls)

    @classmethod
    def decoration_of(cls, name: str) -> DecorationDescriptor:
        return registry_for(cls).descriptor_of(name)


def _require_model(model: object) -> None:
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise ConfigError(f"Decorations can only be installed on pydantic models, got {model!r}")


def _resolve_function(model: type, function: Callable[..., Any] | str) -> Callable[..., Any]:
    if not isinstance(function, str):
        return function
    resolved = getattr(model, function, None)
    if resolved is None or not callable(resolved):
        raise ConfigError(f"{model.__name__} has no callable attribute '{function}'")
    return resolved

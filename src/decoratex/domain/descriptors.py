"""Decoration descriptors and their computations.

A computation is a tagged variant fixed at registration time:

- :class:`Unary` wraps ``f(instance) -> value``
- :class:`WithParams` wraps ``f(instance, params) -> value`` plus the
  default params used whenever a call does not override them

Invocation is a match over the variant; arity is never re-inspected
after :func:`build_computation` has run.
"""

from __future__ import annotations

import inspect
import keyword
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

from decoratex.exceptions import (
    InvalidFieldNameError,
    MissingDefaultParamsError,
    UnexpectedDefaultParamsError,
    UnsupportedArityError,
)


class _Missing:
    """Sentinel type for "no default params supplied"."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Unary:
    """Computation called as ``function(instance)``."""

    function: Callable[[Any], Any]

    arity = 1

    def invoke(self, instance: Any, params: Any = None) -> Any:
        return self.function(instance)


@dataclass(frozen=True)
class WithParams:
    """Computation called as ``function(instance, params)``."""

    function: Callable[[Any, Any], Any]
    default_params: Any

    arity = 2

    def invoke(self, instance: Any, params: Any) -> Any:
        return self.function(instance, params)


Computation = Unary | WithParams


@dataclass(frozen=True)
class DecorationDescriptor:
    """Registered metadata for one derived field.

    Attributes:
        name: Field name, unique within a registry.
        declared_type: Annotation handed to the field declaration layer.
            The engine never looks at it.
        computation: How the value is computed.
    """

    name: str
    declared_type: Any
    computation: Computation

    @property
    def function(self) -> Callable[..., Any]:
        return self.computation.function

    @property
    def arity(self) -> int:
        return self.computation.arity

    @property
    def accepts_params(self) -> bool:
        return isinstance(self.computation, WithParams)

    @property
    def default_params(self) -> Any:
        """Default params for arity-2 computations, ``None`` otherwise."""
        if isinstance(self.computation, WithParams):
            return self.computation.default_params
        return None


def function_arity(function: Callable[..., Any]) -> int:
    """Count the positional parameters *function* accepts.

    Parameters with defaults count too: ``f(instance, params=None)`` has
    arity 2. Variadic positionals and required keyword-only parameters
    make the arity ambiguous and are rejected.

    Raises:
        UnsupportedArityError: If the signature cannot be inspected or
            is not a fixed positional arity.
    """
    if not callable(function):
        raise UnsupportedArityError(function, None, "it is not callable")
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError) as exc:
        raise UnsupportedArityError(function, None) from exc

    arity = 0
    for param in signature.parameters.values():
        if param.kind in _POSITIONAL_KINDS:
            arity += 1
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            raise UnsupportedArityError(function, None, "it accepts *args")
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
            raise UnsupportedArityError(
                function, None, f"keyword-only parameter '{param.name}' has no default"
            )
    return arity


def validate_name(name: object) -> str:
    """Return *name* if it can be used as a decoration field name."""
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidFieldNameError(name)
    if name.startswith("_"):
        # pydantic treats underscore names as private attributes, not fields
        raise InvalidFieldNameError(name)
    return name


def build_computation(
    name: str,
    function: Callable[..., Any],
    default_params: Any = MISSING,
) -> Computation:
    """Inspect *function* once and wrap it in the matching variant."""
    arity = function_arity(function)
    if arity == 1:
        if default_params is not MISSING:
            raise UnexpectedDefaultParamsError(name)
        return Unary(function)
    if arity == 2:
        if default_params is MISSING:
            raise MissingDefaultParamsError(name)
        return WithParams(function, default_params)
    raise UnsupportedArityError(function, arity)


def build_descriptor(
    name: str,
    declared_type: Any,
    function: Callable[..., Any],
    default_params: Any = MISSING,
) -> DecorationDescriptor:
    """Validate and assemble a :class:`DecorationDescriptor`."""
    validate_name(name)
    return DecorationDescriptor(
        name=name,
        declared_type=declared_type,
        computation=build_computation(name, function, default_params),
    )

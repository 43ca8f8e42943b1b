"""decoratex: computed fields for pydantic models, populated on demand.

Declare decorations once per model, then decorate instances with all,
some, or all-but-some of them, optionally overriding params per call.
"""

from __future__ import annotations

from decoratex.domain.descriptors import (
    MISSING,
    DecorationDescriptor,
    Unary,
    WithParams,
)
from decoratex.domain.registry import DecorationRegistry, RedefinitionPolicy, registry_for
from decoratex.domain.selection import Exclude, ResolvedDecoration, exclude, resolve
from decoratex.exceptions import (
    ConfigError,
    ConfigFileError,
    DecorationError,
    DecoratexError,
    FieldCollisionError,
    InvalidFieldNameError,
    InvalidSelectionError,
    MissingDefaultParamsError,
    MissingSlotError,
    RegistryFrozenError,
    UnexpectedDefaultParamsError,
    UnknownFieldError,
    UnregisteredModelError,
    UnsupportedArityError,
)
from decoratex.runtime import active_settings, configure
from decoratex.schema import (
    DecoratedModel,
    FieldDecoration,
    decorate_field,
    decorations,
    install_decorations,
)
from decoratex.services.decorate import decorate

__version__ = "1.1.0"

__all__ = [
    "MISSING",
    "ConfigError",
    "ConfigFileError",
    "DecoratedModel",
    "DecorationDescriptor",
    "DecorationError",
    "DecorationRegistry",
    "DecoratexError",
    "Exclude",
    "FieldCollisionError",
    "FieldDecoration",
    "InvalidFieldNameError",
    "InvalidSelectionError",
    "MissingDefaultParamsError",
    "MissingSlotError",
    "RedefinitionPolicy",
    "RegistryFrozenError",
    "ResolvedDecoration",
    "Unary",
    "UnexpectedDefaultParamsError",
    "UnknownFieldError",
    "UnregisteredModelError",
    "UnsupportedArityError",
    "WithParams",
    "active_settings",
    "configure",
    "decorate",
    "decorate_field",
    "decorations",
    "exclude",
    "install_decorations",
    "registry_for",
    "resolve",
]

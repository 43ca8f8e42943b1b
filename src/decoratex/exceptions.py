"""Exception hierarchy for decoratex.

Two families:
- ConfigError: raised while a model's decorations are being declared.
  Always immediate, never deferred to decoration time.
- DecorationError: raised by ``decorate`` before any computing function runs.

Failures inside user computing functions are not wrapped; they reach the
caller unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any


class DecoratexError(Exception):
    """Base class for every error raised by decoratex itself."""


# --- Definition time ---


class ConfigError(DecoratexError):
    """A decoration or configuration was declared incorrectly."""


class UnsupportedArityError(ConfigError):
    """The computing function takes neither one nor two positional arguments."""

    def __init__(self, function: Any, arity: int | None, reason: str | None = None) -> None:
        self.function = function
        self.arity = arity
        label = getattr(function, "__qualname__", repr(function))
        if reason is not None:
            detail = reason
        elif arity is None:
            detail = "its signature cannot be inspected"
        else:
            detail = f"it takes {arity} positional argument(s)"
        super().__init__(
            f"Fields can only be decorated with functions of arity 1 or 2; "
            f"{label} is unsupported because {detail}"
        )


class MissingDefaultParamsError(ConfigError):
    """An arity-2 computing function was registered without default params."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Decoration '{name}' takes params; default params are required"
        )


class UnexpectedDefaultParamsError(ConfigError):
    """Default params were supplied for an arity-1 computing function."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Decoration '{name}' takes no params; default params are not allowed"
        )


class InvalidFieldNameError(ConfigError):
    """A decoration name is not usable as a model field."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Invalid decoration name: {name!r}")


class RegistryFrozenError(ConfigError):
    """Registration attempted after the registry was installed on a model."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot register '{name}': the decoration registry is frozen"
        )


class FieldCollisionError(ConfigError):
    """A decoration name collides with a regular field of the model."""

    def __init__(self, model: type, names: Iterable[str]) -> None:
        self.model = model
        self.names = sorted(names)
        super().__init__(
            f"{model.__name__} already declares field(s) {self.names}; "
            f"decorations need their own slots"
        )


class ConfigFileError(ConfigError):
    """A decoratex.toml file could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid TOML in {path}: {reason}")


# --- Decoration time ---


class DecorationError(DecoratexError):
    """A decorate call was rejected before any computing function ran."""


class UnknownFieldError(DecorationError):
    """A selection names a field absent from the registry."""

    def __init__(self, name: str, model: type | None = None) -> None:
        self.name = name
        self.model = model
        owner = f" on {model.__name__}" if model is not None else ""
        super().__init__(f"Unknown decoration '{name}'{owner}")


class InvalidSelectionError(DecorationError):
    """A selection expression has a shape decoratex does not understand."""

    def __init__(self, selection: Any, reason: str) -> None:
        self.selection = selection
        self.reason = reason
        super().__init__(f"Invalid selection {selection!r}: {reason}")


class MissingSlotError(DecorationError):
    """The instance has no field to hold a resolved decoration."""

    def __init__(self, name: str, model: type) -> None:
        self.name = name
        self.model = model
        super().__init__(f"{model.__name__} has no slot for decoration '{name}'")


class UnregisteredModelError(DecorationError):
    """The model type carries no decoration registry."""

    def __init__(self, model: type) -> None:
        self.model = model
        super().__init__(f"{model.__name__} declares no decorations")

"""Shared pytest fixtures for decoratex tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from decoratex import DecoratedModel, decorate_field, decorations, runtime
from decoratex.services.telemetry import _current_span, _last_span, disable_telemetry

# ---------------------------------------------------------------------------
# Sample model, shaped after a typical decorated record
# ---------------------------------------------------------------------------


def model_name(element: Any) -> str:
    return type(element).__name__


def model_length(element: Any) -> int:
    return len(model_name(element))


def model_contains(element: Any, text: str) -> bool:
    return text in model_name(element)


def model_replace(element: Any, options: dict[str, str]) -> str:
    return model_name(element).replace(options["pattern"], options["replacement"])


@decorations(
    decorate_field("module_name", str, model_name),
    decorate_field("module_length", int, model_length),
    decorate_field("module_contains", bool, model_contains, ""),
    decorate_field(
        "module_replace",
        str,
        model_replace,
        {"pattern": "Sample", "replacement": ""},
    ),
)
class SampleModel(DecoratedModel):
    title: str = "Sample"


@pytest.fixture
def sample_model() -> type[SampleModel]:
    """The decorated SampleModel class."""
    return SampleModel


@pytest.fixture
def sample() -> SampleModel:
    """A fresh, undecorated SampleModel instance."""
    return SampleModel()


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Keep telemetry and configured settings from leaking between tests."""
    yield
    disable_telemetry()
    _current_span.set(None)
    _last_span.set(None)
    runtime.reset()

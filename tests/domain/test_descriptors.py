"""Tests for descriptor construction and arity inspection."""

from __future__ import annotations

import functools
from typing import Any

import pytest

from decoratex.domain.descriptors import (
    MISSING,
    Unary,
    WithParams,
    build_computation,
    build_descriptor,
    function_arity,
    validate_name,
)
from decoratex.exceptions import (
    InvalidFieldNameError,
    MissingDefaultParamsError,
    UnexpectedDefaultParamsError,
    UnsupportedArityError,
)


def one(instance: Any) -> str:
    return "one"


def two(instance: Any, params: Any) -> tuple[Any, Any]:
    return instance, params


class TestFunctionArity:
    def test_plain_functions(self) -> None:
        assert function_arity(one) == 1
        assert function_arity(two) == 2
        assert function_arity(lambda: None) == 0
        assert function_arity(lambda a, b, c: None) == 3

    def test_defaults_count(self) -> None:
        def optional(instance: Any, params: Any = None) -> None:
            return None

        assert function_arity(optional) == 2

    def test_optional_keyword_only_ignored(self) -> None:
        def kw(instance: Any, *, strict: bool = False) -> None:
            return None

        assert function_arity(kw) == 1

    def test_partial(self) -> None:
        assert function_arity(functools.partial(two, "bound")) == 1

    def test_bound_method(self) -> None:
        class Helper:
            def compute(self, instance: Any) -> int:
                return 1

        assert function_arity(Helper().compute) == 1

    def test_var_positional_rejected(self) -> None:
        with pytest.raises(UnsupportedArityError, match=r"\*args"):
            function_arity(lambda *args: None)

    def test_required_keyword_only_rejected(self) -> None:
        def kw(instance: Any, *, mode: str) -> None:
            return None

        with pytest.raises(UnsupportedArityError, match="mode"):
            function_arity(kw)

    def test_not_callable_rejected(self) -> None:
        with pytest.raises(UnsupportedArityError):
            function_arity("nope")  # type: ignore[arg-type]


class TestBuildComputation:
    def test_unary(self) -> None:
        computation = build_computation("x", one)
        assert isinstance(computation, Unary)
        assert computation.arity == 1
        assert computation.invoke(object()) == "one"

    def test_with_params(self) -> None:
        computation = build_computation("x", two, {"k": 1})
        assert isinstance(computation, WithParams)
        assert computation.arity == 2
        assert computation.default_params == {"k": 1}
        assert computation.invoke("i", "p") == ("i", "p")

    def test_explicit_none_is_a_default(self) -> None:
        computation = build_computation("x", two, None)
        assert isinstance(computation, WithParams)
        assert computation.default_params is None

    @pytest.mark.parametrize("function", [lambda: 1, lambda a, b, c: 1])
    def test_unsupported_arity(self, function: Any) -> None:
        with pytest.raises(UnsupportedArityError) as exc_info:
            build_computation("x", function)
        assert exc_info.value.arity in (0, 3)

    def test_missing_default_params(self) -> None:
        with pytest.raises(MissingDefaultParamsError) as exc_info:
            build_computation("censor", two)
        assert exc_info.value.name == "censor"

    def test_unexpected_default_params(self) -> None:
        with pytest.raises(UnexpectedDefaultParamsError):
            build_computation("x", one, {"k": 1})


class TestValidateName:
    @pytest.mark.parametrize("name", ["title", "word_count", "x1"])
    def test_valid(self, name: str) -> None:
        assert validate_name(name) == name

    @pytest.mark.parametrize("name", ["", "1x", "with space", "class", "except", "_private", 3])
    def test_invalid(self, name: Any) -> None:
        with pytest.raises(InvalidFieldNameError):
            validate_name(name)


class TestDecorationDescriptor:
    def test_unary_accessors(self) -> None:
        descriptor = build_descriptor("name", str, one)
        assert descriptor.name == "name"
        assert descriptor.declared_type is str
        assert descriptor.function is one
        assert descriptor.arity == 1
        assert descriptor.accepts_params is False
        assert descriptor.default_params is None

    def test_with_params_accessors(self) -> None:
        descriptor = build_descriptor("pair", tuple, two, "default")
        assert descriptor.arity == 2
        assert descriptor.accepts_params is True
        assert descriptor.default_params == "default"

    def test_frozen(self) -> None:
        descriptor = build_descriptor("name", str, one)
        with pytest.raises(Exception):
            descriptor.name = "other"  # type: ignore[misc]


class TestMissing:
    def test_singleton_and_falsy(self) -> None:
        assert type(MISSING)() is MISSING
        assert not MISSING
        assert repr(MISSING) == "MISSING"

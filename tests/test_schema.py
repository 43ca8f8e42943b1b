"""Tests for declaring decorations on pydantic models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from decoratex import (
    DecoratedModel,
    DecorationRegistry,
    RedefinitionPolicy,
    decorate,
    decorate_field,
    decorations,
    install_decorations,
)
from decoratex.exceptions import (
    ConfigError,
    FieldCollisionError,
    MissingDefaultParamsError,
    RegistryFrozenError,
    UnexpectedDefaultParamsError,
    UnregisteredModelError,
    UnsupportedArityError,
)


def word_count(doc: Any) -> int:
    return len(doc.body.split())


def excerpt(doc: Any, params: dict[str, int]) -> str:
    return doc.body[: params["size"]]


@decorations(
    decorate_field("words", int, word_count),
    decorate_field("excerpt", str, excerpt, {"size": 5}),
    decorate_field("shout", str, "shout_title"),
)
class Doc(DecoratedModel):
    """A document."""

    title: str = "title"
    body: str = "one two three four"

    def shout_title(self) -> str:
        return self.title.upper()


class TestFieldDeclaration:
    def test_slots_declared_in_registry_order(self) -> None:
        fields = list(Doc.model_fields)
        assert fields[:2] == ["title", "body"]
        assert fields[2:] == ["words", "excerpt", "shout"]

    def test_slots_are_nullable_and_unset(self) -> None:
        doc = Doc()
        assert doc.words is None
        assert doc.excerpt is None
        assert doc.shout is None
        for name in ("words", "excerpt", "shout"):
            assert Doc.model_fields[name].is_required() is False

    def test_class_identity_preserved(self) -> None:
        assert Doc.__name__ == "Doc"
        assert Doc.__qualname__ == "Doc"
        assert Doc.__module__ == __name__
        assert Doc.__doc__ == "A document."

    def test_slot_types_validated_on_construction(self) -> None:
        assert Doc(words=3).words == 3
        with pytest.raises(Exception):
            Doc(words="many")

    def test_serializes_like_a_regular_field(self) -> None:
        dumped = Doc().decorate("words").model_dump()
        assert dumped["words"] == 4
        assert dumped["excerpt"] is None


class TestRegistry:
    def test_registry_attached_and_frozen(self) -> None:
        registry = Doc.decoration_registry()
        assert registry.owner is Doc
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register("late", str, word_count)

    def test_decoration_of(self) -> None:
        descriptor = Doc.decoration_of("excerpt")
        assert descriptor.default_params == {"size": 5}
        assert descriptor.declared_type is str

    def test_string_reference_resolves_to_method(self) -> None:
        assert Doc().decorate("shout").shout == "TITLE"

    def test_undecorated_decorated_model(self) -> None:
        class Bare(DecoratedModel):
            pass

        with pytest.raises(UnregisteredModelError):
            Bare().decorate()

    def test_subclass_inherits_registry(self) -> None:
        class Longer(Doc):
            extra: str = "x"

        decorated = Longer().decorate(["words"])
        assert decorated.words == 4
        assert isinstance(decorated, Longer)


class TestDecoratedSubclass:
    def test_keeps_parent_decorations(self) -> None:
        @decorations(decorate_field("chars", int, lambda doc: len(doc.body)))
        class Child(Doc):
            pass

        assert Child.decoration_registry().names() == ("words", "excerpt", "shout", "chars")
        assert Child.decoration_registry().owner is Child
        decorated = Child().decorate()
        assert decorated.words == 4
        assert decorated.excerpt == "one t"
        assert decorated.shout == "TITLE"
        assert decorated.chars == 18
        assert Child().decorate("words").words == 4

    def test_slots_declared_once(self) -> None:
        @decorations(decorate_field("chars", int, lambda doc: len(doc.body)))
        class Child(Doc):
            pass

        assert sorted(Child.model_fields) == sorted(
            ["title", "body", "words", "excerpt", "shout", "chars"]
        )

    def test_parent_registry_untouched(self) -> None:
        @decorations(decorate_field("chars", int, lambda doc: len(doc.body)))
        class Child(Doc):
            pass

        assert Doc.decoration_registry().names() == ("words", "excerpt", "shout")
        assert Doc.decoration_registry().owner is Doc

    def test_redefines_parent_decoration(self) -> None:
        @decorations(decorate_field("words", int, lambda doc: 0))
        class Child(Doc):
            pass

        assert Child.decoration_registry().names() == ("excerpt", "shout", "words")
        assert Child().decorate("words").words == 0
        assert Doc().decorate("words").words == 4

    def test_redefines_in_place_when_requested(self) -> None:
        @decorations(
            decorate_field("words", int, lambda doc: 0),
            redefinition=RedefinitionPolicy.IN_PLACE,
        )
        class Child(Doc):
            pass

        assert Child.decoration_registry().names() == ("words", "excerpt", "shout")

    def test_collision_with_subclass_field(self) -> None:
        with pytest.raises(FieldCollisionError) as exc_info:

            @decorations(decorate_field("extra", str, lambda doc: "x"))
            class Child(Doc):
                extra: str = "x"

        assert exc_info.value.names == ["extra"]


class TestDecorateMethod:
    def test_method_and_function_agree(self) -> None:
        doc = Doc()
        assert doc.decorate() == decorate(doc)

    def test_params_override(self) -> None:
        assert Doc().decorate({"excerpt": {"size": 3}}).excerpt == "one"

    def test_returns_same_type(self) -> None:
        assert type(Doc().decorate()) is Doc


class TestDefinitionErrors:
    def test_arity_error_at_definition(self) -> None:
        with pytest.raises(UnsupportedArityError):

            @decorations(decorate_field("bad", str, lambda a, b, c: None))
            class Bad(DecoratedModel):
                pass

    def test_missing_default_params_at_definition(self) -> None:
        with pytest.raises(MissingDefaultParamsError):

            @decorations(decorate_field("bad", str, excerpt))
            class Bad(DecoratedModel):
                pass

    def test_unexpected_default_params_at_definition(self) -> None:
        with pytest.raises(UnexpectedDefaultParamsError):

            @decorations(decorate_field("bad", str, word_count, {"size": 1}))
            class Bad(DecoratedModel):
                pass

    def test_collision_with_regular_field(self) -> None:
        with pytest.raises(FieldCollisionError) as exc_info:

            @decorations(decorate_field("title", str, word_count))
            class Bad(DecoratedModel):
                title: str = "t"

        assert exc_info.value.names == ["title"]

    def test_unknown_string_reference(self) -> None:
        with pytest.raises(ConfigError, match="no_such_method"):

            @decorations(decorate_field("bad", str, "no_such_method"))
            class Bad(DecoratedModel):
                pass

    def test_non_model_rejected(self) -> None:
        with pytest.raises(ConfigError):

            @decorations(decorate_field("x", str, word_count))
            class NotAModel:
                pass


class TestRedefinition:
    def test_move_to_end_by_default(self) -> None:
        @decorations(
            decorate_field("a", str, lambda m: "first"),
            decorate_field("b", str, lambda m: "b"),
            decorate_field("a", str, lambda m: "second"),
        )
        class Model(DecoratedModel):
            pass

        assert Model.decoration_registry().names() == ("b", "a")
        assert list(Model.model_fields) == ["b", "a"]
        assert Model().decorate("a").a == "second"

    def test_in_place_when_requested(self) -> None:
        @decorations(
            decorate_field("a", str, lambda m: "first"),
            decorate_field("b", str, lambda m: "b"),
            decorate_field("a", str, lambda m: "second"),
            redefinition=RedefinitionPolicy.IN_PLACE,
        )
        class Model(DecoratedModel):
            pass

        assert Model.decoration_registry().names() == ("a", "b")
        assert Model().decorate("a").a == "second"


class TestInstallDecorations:
    def test_plain_base_model(self) -> None:
        class Plain(BaseModel):
            body: str = "a b"

        registry = DecorationRegistry()
        registry.register("words", int, word_count)
        Decorated = install_decorations(Plain, registry)

        assert issubclass(Decorated, Plain)
        assert decorate(Decorated()).words == 2

    def test_frozen_model(self) -> None:
        class Frozen(BaseModel):
            model_config = {"frozen": True}

            body: str = "a b c"

        registry = DecorationRegistry()
        registry.register("words", int, word_count)
        Decorated = install_decorations(Frozen, registry)

        original = Decorated()
        decorated = decorate(original)
        assert decorated.words == 3
        assert original.words is None

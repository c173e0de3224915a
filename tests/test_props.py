"""Tests for prop variants: the tagged union the resolution engine matches on."""

import pytest

from pagewire.inertia.props import (
    Prop,
    PropKind,
    always,
    as_prop,
    deep_merge,
    defer,
    merge,
    once,
    optional,
)


class TestConstructors:
    def test_always(self) -> None:
        prop = always("token")
        assert prop.kind is PropKind.ALWAYS
        assert prop.value == "token"

    def test_merge_is_shallow(self) -> None:
        prop = merge([1, 2])
        assert prop.kind is PropKind.MERGE
        assert prop.merge == "shallow"

    def test_deep_merge(self) -> None:
        prop = deep_merge({"a": {"b": 1}})
        assert prop.kind is PropKind.MERGE
        assert prop.merge == "deep"

    def test_defer_default_group(self) -> None:
        prop = defer(lambda: 1)
        assert prop.kind is PropKind.DEFERRED
        assert prop.group == "default"

    def test_defer_named_group(self) -> None:
        assert defer(lambda: 1, group="charts").group == "charts"

    def test_optional(self) -> None:
        assert optional(lambda: 1).kind is PropKind.OPTIONAL

    def test_once(self) -> None:
        prop = once(lambda: ["basic", "pro"])
        assert prop.kind is PropKind.ONCE
        assert prop.ttl is None
        assert prop.refresh is False


class TestChaining:
    def test_deferred_can_merge(self) -> None:
        prop = defer(lambda: [], group="feed").merged()
        assert prop.kind is PropKind.DEFERRED
        assert prop.merge == "shallow"
        assert prop.group == "feed"

    def test_deep_merged(self) -> None:
        assert merge({}).deep_merged().merge == "deep"

    def test_once_options(self) -> None:
        prop = once(lambda: 1).as_key("plans").until(60).fresh()
        assert prop.key == "plans"
        assert prop.ttl == 60
        assert prop.refresh is True

    def test_chaining_returns_new_instance(self) -> None:
        base = once(lambda: 1)
        keyed = base.as_key("k")
        assert base.key is None
        assert keyed is not base

    def test_prop_is_frozen(self) -> None:
        prop = always(1)
        with pytest.raises(AttributeError):
            prop.value = 2  # type: ignore[misc]


class TestAsProp:
    def test_plain_value_is_wrapped(self) -> None:
        prop = as_prop({"id": 1})
        assert prop == Prop(PropKind.PLAIN, {"id": 1})

    def test_resolver_is_wrapped_plain(self) -> None:
        def resolver() -> int:
            return 1

        prop = as_prop(resolver)
        assert prop.kind is PropKind.PLAIN
        assert prop.value is resolver

    def test_prop_passes_through(self) -> None:
        prop = defer(lambda: 1)
        assert as_prop(prop) is prop

    def test_kinds_are_closed(self) -> None:
        assert {k.value for k in PropKind} == {
            "plain",
            "always",
            "merge",
            "deferred",
            "optional",
            "once",
        }

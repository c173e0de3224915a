"""Tests for the request-scoped shared state store."""

import pytest

from pagewire.inertia import state as shared
from pagewire.inertia.props import PropKind
from pagewire.inertia.state import SharedDefaults, SharedState, bind_state, current_state


class TestSharedState:
    def test_share_and_get(self) -> None:
        state = SharedState()
        assert state.share("user", {"id": 1}) == {"id": 1}
        assert state.get("user") == {"id": 1}

    def test_share_overwrites(self) -> None:
        state = SharedState()
        state.share("title", "a")
        state.share("title", "b")
        assert state.get("title") == "b"

    def test_get_all_is_a_snapshot(self) -> None:
        state = SharedState()
        state.share("a", 1)
        snapshot = state.get()
        snapshot["b"] = 2
        assert state.get() == {"a": 1}

    def test_get_missing_returns_default(self) -> None:
        assert SharedState().get("nope", "fallback") == "fallback"

    def test_flush_one(self) -> None:
        state = SharedState()
        state.share("a", 1)
        state.share("b", 2)
        state.flush("a")
        assert state.get() == {"b": 2}

    def test_flush_all(self) -> None:
        state = SharedState()
        state.share("a", 1)
        state.flush()
        assert state.get() == {}

    def test_flush_missing_key_is_noop(self) -> None:
        state = SharedState()
        state.flush("missing")
        assert state.get() == {}

    def test_view_data_is_separate_from_props(self) -> None:
        state = SharedState()
        state.set_view_data("title", "Home")
        assert state.get_view_data("title") == "Home"
        assert state.get() == {}

    def test_share_once_stores_a_once_prop(self) -> None:
        state = SharedState()
        prop = state.share_once("permissions", list)
        assert prop.kind is PropKind.ONCE
        assert prop.value is list
        assert state.get("permissions") is prop

    def test_refresh_once_deduplicates(self) -> None:
        state = SharedState()
        state.refresh_once("plans", "plans", "tiers")
        assert state.refreshed_once == ("plans", "tiers")


class TestDefaults:
    def test_seeded_from_defaults(self) -> None:
        defaults = SharedDefaults.freeze(
            {"app": "Acme"}, {"lang": "en"}, encrypt_history=True, version="abc"
        )
        state = SharedState(defaults)
        assert state.get("app") == "Acme"
        assert state.get_view_data("lang") == "en"
        assert state.encrypt_history is True
        assert state.version == "abc"
        assert state.clear_history is False

    def test_request_mutations_do_not_leak_into_defaults(self) -> None:
        defaults = SharedDefaults.freeze({"app": "Acme"}, {})
        first = SharedState(defaults)
        first.share("user", "alice")
        first.flush("app")

        second = SharedState(defaults)
        assert second.get() == {"app": "Acme"}

    def test_defaults_are_read_only(self) -> None:
        defaults = SharedDefaults.freeze({"app": "Acme"}, {})
        with pytest.raises(TypeError):
            defaults.props["app"] = "Other"  # type: ignore[index]


class TestRequestScope:
    def test_module_functions_raise_outside_request(self) -> None:
        with pytest.raises(LookupError, match="No active page state"):
            shared.share("a", 1)

    def test_module_functions_use_bound_state(self) -> None:
        state = SharedState()
        with bind_state(state):
            shared.share("user", "alice")
            shared.share_once("plans", "pro")
            shared.view_data("title", "Home")
            shared.encrypt_history()
            shared.clear_history()
            shared.refresh_once("plans")
            shared.set_root_view("admin.html")
            assert shared.get_shared("user") == "alice"
            assert shared.get_view_data("title") == "Home"
            assert shared.get_shared("plans").kind is PropKind.ONCE
            shared.flush_shared("user")
            shared.flush_shared("plans")
            assert shared.get_shared() == {}

        assert state.encrypt_history is True
        assert state.clear_history is True
        assert state.refreshed_once == ("plans",)
        assert state.root_view == "admin.html"

    def test_binding_is_reset_after_block(self) -> None:
        with bind_state(SharedState()):
            current_state()
        with pytest.raises(LookupError):
            current_state()

    async def test_concurrent_tasks_see_their_own_state(self) -> None:
        import anyio

        seen: dict[str, object] = {}

        async def run(name: str) -> None:
            with bind_state(SharedState()):
                shared.share("who", name)
                await anyio.sleep(0.01)
                seen[name] = shared.get_shared("who")

        async with anyio.create_task_group() as tg:
            tg.start_soon(run, "a")
            tg.start_soon(run, "b")

        assert seen == {"a": "a", "b": "b"}

"""Shared state store: request-scoped, seeded from app-wide defaults.

Upstream code (auth middleware, policies) contributes props and
view-data before the page is built: "share the current user",
"set the page title". Each request owns a fresh ``SharedState``;
the only process-wide data is the frozen set of defaults registered
on the app during setup, which every request copies.

Usage::

    from pagewire.inertia import share, view_data

    async def auth(request, next):
        share("auth", {"user": await load_user(request)})
        return await next(request)

The store lives in a ContextVar, so concurrent requests never see each
other's shares. Calling the module functions outside a request raises
``LookupError``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pagewire.config import VersionProvider
from pagewire.inertia.props import Prop, once


@dataclass(frozen=True, slots=True)
class SharedDefaults:
    """App-wide props and view-data every request starts from. Immutable."""

    props: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    view_data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    encrypt_history: bool = False
    version: VersionProvider = "1"
    debug: bool = False

    @classmethod
    def freeze(
        cls,
        props: Mapping[str, Any],
        view_data: Mapping[str, Any],
        *,
        encrypt_history: bool = False,
        version: VersionProvider = "1",
        debug: bool = False,
    ) -> SharedDefaults:
        return cls(
            props=MappingProxyType(dict(props)),
            view_data=MappingProxyType(dict(view_data)),
            encrypt_history=encrypt_history,
            version=version,
            debug=debug,
        )


class SharedState:
    """Mutable per-request registry of shared props and view-data.

    All operations are synchronous in-memory mutations. Entries may be
    plain values, resolvers, or ``Prop`` wrappers; nothing is resolved
    here.
    """

    __slots__ = (
        "_props",
        "_refresh_once",
        "_view_data",
        "clear_history",
        "debug",
        "encrypt_history",
        "root_view",
        "version",
    )

    def __init__(self, defaults: SharedDefaults | None = None) -> None:
        defaults = defaults or SharedDefaults()
        self._props: dict[str, Any] = dict(defaults.props)
        self._view_data: dict[str, Any] = dict(defaults.view_data)
        self._refresh_once: list[str] = []
        self.encrypt_history: bool = defaults.encrypt_history
        self.clear_history: bool = False
        self.root_view: str | None = None
        self.version: VersionProvider = defaults.version
        self.debug: bool = defaults.debug

    # -- Props --

    def share(self, key: str, value: Any = None) -> Any:
        """Insert or overwrite a shared prop. Returns *value*."""
        self._props[key] = value
        return value

    def share_once(self, key: str, value: Any) -> Prop:
        """Share *value* as a once-prop, so clients that hold it skip it.

        Returns the ``Prop`` so callers can chain ``.until()``, ``.as_key()``.
        Chained copies must be shared again to take effect.
        """
        prop = once(value)
        self._props[key] = prop
        return prop

    def get(self, key: str | None = None, default: Any = None) -> Any:
        """The entry at *key*, or a snapshot of every shared prop."""
        if key is None:
            return dict(self._props)
        return self._props.get(key, default)

    def flush(self, key: str | None = None) -> None:
        """Drop one shared prop, or all of them."""
        if key is None:
            self._props.clear()
        else:
            self._props.pop(key, None)

    # -- View data (root template only, never sent as props) --

    def set_view_data(self, key: str, value: Any) -> Any:
        self._view_data[key] = value
        return value

    def get_view_data(self, key: str | None = None, default: Any = None) -> Any:
        if key is None:
            return dict(self._view_data)
        return self._view_data.get(key, default)

    # -- Once props --

    def refresh_once(self, *keys: str) -> None:
        """Force the once-props *keys* to be re-sent on this response."""
        for key in keys:
            if key not in self._refresh_once:
                self._refresh_once.append(key)

    @property
    def refreshed_once(self) -> tuple[str, ...]:
        return tuple(self._refresh_once)

    def __repr__(self) -> str:
        return f"<SharedState props={sorted(self._props)} view_data={sorted(self._view_data)}>"


# -- Request-scoped access --

_state_var: ContextVar[SharedState | None] = ContextVar("pagewire_shared_state", default=None)


def current_state() -> SharedState:
    """Return the current request's store.

    Raises ``LookupError`` outside a request.
    """
    state = _state_var.get()
    if state is None:
        msg = (
            "No active page state. share() and friends only work while a "
            "request is being handled; use App.share() for app-wide defaults."
        )
        raise LookupError(msg)
    return state


@contextmanager
def bind_state(state: SharedState) -> Iterator[SharedState]:
    """Make *state* the current store for the enclosed block."""
    token = _state_var.set(state)
    try:
        yield state
    finally:
        _state_var.reset(token)


def share(key: str, value: Any = None) -> Any:
    """Share a prop with every page built during this request."""
    return current_state().share(key, value)


def share_once(key: str, value: Any) -> Prop:
    """Share a once-prop (for example permissions loaded in a middleware)."""
    return current_state().share_once(key, value)


def get_shared(key: str | None = None) -> Any:
    return current_state().get(key)


def flush_shared(key: str | None = None) -> None:
    """Forget one shared prop, or all of them (e.g. on logout)."""
    current_state().flush(key)


def view_data(key: str, value: Any) -> Any:
    """Expose *value* to the root HTML template only."""
    return current_state().set_view_data(key, value)


def get_view_data(key: str | None = None) -> Any:
    return current_state().get_view_data(key)


def encrypt_history(encrypt: bool = True) -> None:
    """Ask the client to encrypt this page's history entry."""
    current_state().encrypt_history = encrypt


def clear_history() -> None:
    """Ask the client to drop its encrypted history (e.g. after logout)."""
    current_state().clear_history = True


def refresh_once(*keys: str) -> None:
    current_state().refresh_once(*keys)


def set_root_view(template: str) -> None:
    """Use a different root HTML template for this request's full-page load."""
    current_state().root_view = template

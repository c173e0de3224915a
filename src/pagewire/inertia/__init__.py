"""The page protocol.

Handlers return ``Page(component, props)``; the app answers with a JSON
page object for protocol requests (``X-Inertia`` present) or a full HTML
document embedding the same page object otherwise.

Prop variants and the request-scoped shared store are imported eagerly.
Everything that depends on the HTTP layer is loaded on first access,
since ``pagewire.http.request`` itself reads the header names from
``pagewire.inertia.headers``.
"""

import importlib

from pagewire.inertia.props import (
    Prop,
    PropKind,
    always,
    deep_merge,
    defer,
    merge,
    once,
    optional,
)
from pagewire.inertia.state import (
    clear_history,
    encrypt_history,
    flush_shared,
    get_shared,
    get_view_data,
    refresh_once,
    set_root_view,
    share,
    share_once,
    view_data,
)

__all__ = [
    "BACK",
    "InertiaMiddleware",
    "Location",
    "Page",
    "Prop",
    "PropKind",
    "always",
    "back",
    "clear_history",
    "deep_merge",
    "defer",
    "encrypt_history",
    "flash",
    "flush_shared",
    "get_shared",
    "get_view_data",
    "manifest_version",
    "merge",
    "once",
    "optional",
    "redirect_back_with_errors",
    "refresh_once",
    "set_root_view",
    "share",
    "share_once",
    "view_data",
]

_LAZY = {
    "BACK": "pagewire.inertia.redirect",
    "back": "pagewire.inertia.redirect",
    "redirect_back_with_errors": "pagewire.inertia.redirect",
    "flash": "pagewire.inertia.flashes",
    "InertiaMiddleware": "pagewire.inertia.middleware",
    "Location": "pagewire.inertia.returns",
    "Page": "pagewire.inertia.returns",
    "manifest_version": "pagewire.inertia.version",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the HTTP-dependent half of the API."""
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module 'pagewire.inertia' has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)

"""Pagewire: server-side adapter for SPA page-object navigation.

Handlers return a component name and props; pagewire answers a full
HTML document on first load and a JSON page object on every client-side
visit after that, with partial reloads, deferred and merged props,
asset versioning, and redirects the client understands.

Basic usage::

    from pagewire import App, AppConfig, Page
    from pagewire.inertia import InertiaMiddleware, defer

    app = App(AppConfig(debug=True))
    app.add_middleware(InertiaMiddleware())

    @app.route("/users")
    async def users():
        return Page("Users/Index", {"users": load_users, "stats": defer(load_stats)})

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "Location",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Page",
    "PagewireError",
    "Redirect",
    "Request",
    "Response",
    "ValidationError",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pagewire`` fast while providing a clean top-level API.
    """
    if name == "App":
        from pagewire.app import App

        return App

    if name == "AppConfig":
        from pagewire.config import AppConfig

        return AppConfig

    if name == "Request":
        from pagewire.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from pagewire.http import response as _resp

        return getattr(_resp, name)

    if name in ("Page", "Location"):
        from pagewire.inertia import returns as _returns

        return getattr(_returns, name)

    if name in ("Middleware", "Next"):
        from pagewire.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from pagewire.context import get_request

        return get_request

    if name in (
        "PagewireError",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ValidationError",
    ):
        from pagewire import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

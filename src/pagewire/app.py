"""Pagewire application class.

An ``App`` has two phases. During setup it collects routes, middleware,
error handlers, shared defaults and template hooks. On the first
request (or ``app.run()``, or entering a ``TestClient``) everything is
compiled into an immutable ``_Runtime`` snapshot and further setup
calls raise ``RuntimeError``.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kida import Environment

from pagewire._internal.asgi import ErrorHandler, Handler, Receive, Scope, Send
from pagewire._internal.invoke import invoke
from pagewire.config import AppConfig
from pagewire.errors import ConfigurationError
from pagewire.inertia.state import SharedDefaults
from pagewire.middleware.protocol import Middleware
from pagewire.routing.route import Route
from pagewire.routing.router import Router
from pagewire.server.handler import handle_request
from pagewire.templating.integration import configure_environment, create_environment

logger = logging.getLogger("pagewire.app")


@dataclass(frozen=True, slots=True)
class _Runtime:
    """Everything a request needs, fixed at freeze time."""

    router: Router
    middleware: tuple[Middleware, ...]
    error_handlers: dict[int | type, ErrorHandler]
    kida_env: Environment
    defaults: SharedDefaults


class App:
    """The pagewire application.

    Usage::

        app = App(AppConfig(debug=True))
        app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))
        app.add_middleware(InertiaMiddleware())
        app.share("app_name", "Acme")

        @app.route("/users")
        async def users():
            return Page("Users/Index", {"users": load_users})
    """

    __slots__ = (
        "_error_handlers",
        "_filters",
        "_globals",
        "_kida_env",
        "_lock",
        "_middleware",
        "_routes",
        "_runtime",
        "_shared",
        "_shutdown_hooks",
        "_startup_hooks",
        "_view_data",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        if not self.config.root_view:
            msg = "AppConfig.root_view must name the root HTML template (e.g. 'app.html')."
            raise ConfigurationError(msg)

        self._kida_env = kida_env
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._filters: dict[str, Callable[..., Any]] = {}
        self._globals: dict[str, Any] = {}
        self._shared: dict[str, Any] = {}
        self._view_data: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._runtime: _Runtime | None = None
        self._lock = threading.Lock()

    # -- Setup --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. ``{param}`` captures one segment,
                ``{param:path}`` the rest of the path.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.

        A malformed *path* raises ``ConfigurationError`` immediately.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            verbs = frozenset(m.upper() for m in methods or ["GET"])
            self._routes.append(Route(path, func, verbs, name))
            return func

        return decorator

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler for a status code or exception type."""
        return self._collector(self._error_handlers, code_or_exception)

    def add_middleware(self, middleware: Middleware) -> None:
        """Append to the pipeline. The first one added runs outermost."""
        self._check_not_frozen()
        self._middleware.append(middleware)

    def share(self, key: str, value: Any = None) -> Any:
        """Share a prop with every page of every request.

        Each request starts from a copy of these; ``pagewire.inertia.share()``
        adds per-request values on top.
        """
        self._check_not_frozen()
        self._shared[key] = value
        return value

    def view_data(self, key: str, value: Any) -> Any:
        """Expose *value* to the root HTML template on every full-page load."""
        self._check_not_frozen()
        self._view_data[key] = value
        return value

    def template_filter(self, name: str | None = None) -> Callable[[Any], Any]:
        """Register a kida filter, named after the function by default."""
        return self._collector(self._filters, name)

    def template_global(self, name: str | None = None) -> Callable[[Any], Any]:
        return self._collector(self._globals, name)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) when the server starts."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def _collector(self, registry: dict[Any, Any], key: Any) -> Callable[[Any], Any]:
        def decorator(func: Any) -> Any:
            self._check_not_frozen()
            registry[key if key is not None else func.__name__] = func
            return func

        return decorator

    # -- Lifecycle --

    async def startup(self) -> None:
        """Freeze the app and run the startup hooks in registration order."""
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        for hook in self._shutdown_hooks:
            await invoke(hook)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it with the pounce dev server."""
        self._ensure_frozen()

        from pagewire.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        runtime = self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=runtime.router,
            middleware=runtime.middleware,
            error_handlers=runtime.error_handlers,
            defaults=runtime.defaults,
            kida_env=runtime.kida_env,
            root_view=self.config.root_view,
            debug=self.config.debug,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        await self.startup()
                    except Exception as exc:
                        logger.exception("Startup failed")
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await self.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    # -- Freezing --

    def _ensure_frozen(self) -> _Runtime:
        runtime = self._runtime
        if runtime is not None:
            return runtime
        with self._lock:
            if self._runtime is None:
                self._runtime = self._compile()
                logger.debug(
                    "App frozen with %d routes and %d middleware",
                    len(self._routes),
                    len(self._middleware),
                )
            return self._runtime

    def _compile(self) -> _Runtime:
        router = Router()
        for route in self._routes:
            router.add(route)
        router.compile()

        if self._kida_env is None:
            env = create_environment(self.config, self._filters, self._globals)
        else:
            env = configure_environment(
                self._kida_env,
                self._filters,
                self._globals,
                root_element_id=self.config.root_element_id,
            )

        return _Runtime(
            router=router,
            middleware=tuple(self._middleware),
            error_handlers=dict(self._error_handlers),
            kida_env=env,
            defaults=SharedDefaults.freeze(
                self._shared,
                self._view_data,
                encrypt_history=self.config.encrypt_history,
                version=self.config.version,
                debug=self.config.debug,
            ),
        )

    def _check_not_frozen(self) -> None:
        if self._runtime is not None:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and shared defaults before calling app.run()."
            )
            raise RuntimeError(msg)

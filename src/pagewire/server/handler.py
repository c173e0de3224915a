"""ASGI handler: translates ASGI scope/messages to pagewire types.

The only component that touches raw ASGI directly. Per request it:

1. builds a ``Request`` and publishes it through ``request_var``
2. binds a fresh ``SharedState`` seeded from the app's frozen defaults
3. runs the middleware chain around router dispatch
4. maps errors to responses and sends the result

Steps 1-2 happen before any middleware runs, so ``share()`` works
everywhere in the chain.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from contextvars import Token
from typing import TYPE_CHECKING, Any

from pagewire._internal.asgi import Receive, Scope, Send
from pagewire._internal.invoke import invoke
from pagewire.context import request_var
from pagewire.errors import HTTPError
from pagewire.http.request import Request
from pagewire.http.response import Response
from pagewire.inertia.state import SharedDefaults, SharedState, bind_state
from pagewire.middleware.protocol import Next
from pagewire.routing.route import RouteMatch
from pagewire.routing.router import Router
from pagewire.server.errors import handle_http_error, handle_internal_error
from pagewire.server.negotiation import negotiate
from pagewire.server.sender import send_response

if TYPE_CHECKING:
    from kida import Environment


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    defaults: SharedDefaults,
    kida_env: Environment | None = None,
    root_view: str = "app.html",
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token: Token[Request] = request_var.set(request)

    try:
        with bind_state(SharedState(defaults)):

            async def dispatch(req: Request) -> Response:
                match = router.match(req.method, req.path)
                return await _invoke_handler(match, req, kida_env=kida_env, root_view=root_view)

            handler: Next = dispatch
            for mw in reversed(middleware):

                async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
                    return await _mw(req, _next)

                handler = make_next

            try:
                response = await handler(request)
            except HTTPError as exc:
                response = await handle_http_error(
                    exc, request, error_handlers, kida_env, root_view
                )
            except Exception as exc:
                response = await handle_internal_error(
                    exc, request, error_handlers, kida_env, root_view, debug
                )
    finally:
        request_var.reset(token)

    await send_response(response, send, method=request.method)


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    kida_env: Environment | None,
    root_view: str,
) -> Response:
    """Call the matched route handler and negotiate its return value."""
    request = request.with_path_params(match.path_params)
    kwargs = _build_handler_kwargs(match.route.handler, request, match.path_params)
    result = await invoke(match.route.handler, **kwargs)
    return await negotiate(result, request, kida_env=kida_env, root_view=root_view)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Fill handler parameters from the request and path parameters.

    A parameter named ``request`` (or annotated ``Request``) gets the
    request. Path parameters are matched by name and converted through
    their annotation when it is a plain type like ``int``.
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            value = path_params[name]
            if isinstance(param.annotation, type) and param.annotation is not str:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value
    return kwargs

"""Error handling pipeline.

Maps ``HTTPError`` and unexpected failures (a prop resolver raising,
a missing root template) to responses, through user error handlers
registered with ``@app.error()`` or a plain default.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pagewire._internal.invoke import invoke, positional_arity
from pagewire.errors import HTTPError
from pagewire.http.request import Request
from pagewire.http.response import Response
from pagewire.server.negotiation import negotiate

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("pagewire.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    kida_env: Environment | None,
    root_view: str,
) -> Response:
    """Invoke a user error handler taking ``()``, ``(request)`` or ``(request, exc)``.

    Handlers may return anything a route handler may, ``Page`` included.
    """
    arity = positional_arity(handler)
    if arity == -1 or arity >= 2:
        result = await invoke(handler, request, exc)
    elif arity == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)
    return await negotiate(result, request, kida_env=kida_env, root_view=root_view)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None,
    root_view: str,
) -> Response:
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, kida_env, root_view)
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    response = Response(body=exc.detail or f"Error {exc.status}").with_status(exc.status)
    return response.with_headers(dict(exc.headers))


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None,
    root_view: str,
    debug: bool,
) -> Response:
    """Map an unexpected exception to a ``500``."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, kida_env, root_view)
        if response.status == 200:
            response = response.with_status(500)
        return response

    if debug:
        from pagewire.server.debug_page import render_debug_page

        return Response(body=render_debug_page(exc, request), status=500)
    return Response(body="Internal Server Error", status=500)

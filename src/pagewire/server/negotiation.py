"""Content negotiation: maps handler return values to Response objects.

Match-based dispatch on the value's type. ``Page`` is the one branch
that does real work: it builds the page object through the prop
resolution engine and hands it to the response dispatcher, which picks
JSON or HTML from the request headers.
"""

from __future__ import annotations

import json as json_module
from typing import TYPE_CHECKING, Any

from pagewire.http.response import Redirect, Response
from pagewire.inertia.dispatch import respond
from pagewire.inertia.page import build_page
from pagewire.inertia.redirect import location, redirect
from pagewire.inertia.returns import Location, Page
from pagewire.inertia.state import current_state

if TYPE_CHECKING:
    from kida import Environment

    from pagewire.http.request import Request


async def negotiate(
    value: Any,
    request: Request,
    *,
    kida_env: Environment | None = None,
    root_view: str = "app.html",
) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``Redirect``            -> redirect rules (``back``, 302/303, location header)
    3. ``Location``            -> forced full visit (409 for protocol requests)
    4. ``Page``                -> page object as JSON or HTML document
    5. ``str``                 -> 200, text/html
    6. ``bytes``               -> 200, application/octet-stream
    7. ``dict`` / ``list``     -> 200, application/json
    8. ``(value, int)``        -> negotiate value, override status
    9. ``(value, int, dict)``  -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return redirect(value.url, request, status=value.status).with_headers(
                dict(value.headers)
            )
        case Location():
            return location(value.url, request)
        case Page():
            state = current_state()
            page = await build_page(
                value.component,
                value.props,
                value.view_data,
                request,
                state=state,
            )
            return respond(
                page,
                page.view_data,
                request,
                kida_env=kida_env,
                root_view=state.root_view or root_view,
            )
        case str():
            return Response(body=value, content_type="text/html; charset=utf-8")
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case (inner, int() as status):
            response = await negotiate(inner, request, kida_env=kida_env, root_view=root_view)
            return response.with_status(status)
        case (inner, int() as status, dict() as headers):
            response = await negotiate(inner, request, kida_env=kida_env, root_view=root_view)
            return response.with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return Page, Location, Redirect, Response, str, bytes, dict, or list."
            )
            raise TypeError(msg)

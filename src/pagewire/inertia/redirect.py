"""Redirect handler.

Rules, in order:

1. ``"back"`` resolves to the ``Referer`` header, or ``/``.
2. On protocol requests the target is also sent as ``X-Inertia-Location``.
3. ``303 See Other`` after ``PUT``/``PATCH``/``DELETE`` so the browser
   follows with ``GET`` instead of re-submitting; ``302`` otherwise.

``location()`` is the forced full-visit variant: protocol requests get
``409 Conflict`` with ``X-Inertia-Location``, which the client answers
with a browser-level navigation. Version-mismatch reloads use it too.
"""

from collections.abc import Mapping
from urllib.parse import quote

from pagewire.http.request import Request
from pagewire.http.response import Response
from pagewire.inertia import headers as protocol
from pagewire.inertia.flashes import flash_errors

BACK = "back"
"""Sentinel redirect target meaning "the referring page"."""

_SEE_OTHER_METHODS = frozenset({"PUT", "PATCH", "DELETE"})

# Reserved and already-escaped characters pass through untouched
_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"


def back(request: Request, fallback: str = "/") -> str:
    """The referring URL, or *fallback* when the client sent none."""
    return request.referer or fallback


def resolve_target(target: str, request: Request) -> str:
    """The concrete URL for *target*, percent-encoded so it fits in a header."""
    if target == BACK:
        target = back(request)
    return quote(target, safe=_URL_SAFE)


def redirect_status(method: str) -> int:
    return 303 if method.upper() in _SEE_OTHER_METHODS else 302


def redirect(target: str, request: Request, *, status: int | None = None) -> Response:
    """Redirect *request* to *target*. Never fails."""
    url = resolve_target(target, request)
    response = (
        Response(body="")
        .with_status(status or redirect_status(request.method))
        .with_header("Location", url)
    )
    if request.is_inertia:
        response = response.with_header(protocol.LOCATION, url)
    return response


def location(url: str, request: Request) -> Response:
    """Force a full browser visit to *url* (external sites, other apps)."""
    url = resolve_target(url, request)
    if request.is_inertia:
        return Response(body="", status=409).with_header(protocol.LOCATION, url)
    return (
        Response(body="")
        .with_status(redirect_status(request.method))
        .with_header("Location", url)
    )


def redirect_back_with_errors(
    request: Request,
    errors: Mapping[str, str | list[str]],
    *,
    bag: str | None = None,
) -> Response:
    """Flash validation *errors* and send the client back with ``303``.

    The form page re-renders with an ``errors`` prop on the next visit.
    *bag* defaults to the request's ``X-Inertia-Error-Bag``, then
    ``"default"``. Requires ``SessionMiddleware``.
    """
    flash_errors(errors, bag=bag or request.error_bag or "default")
    return redirect(BACK, request, status=303)

"""Request-scoped context via ContextVar.

``request_var`` holds the current ``Request`` for this task. It is set
by the handler pipeline before dispatch and reset afterwards, so
accessing it outside a request raises ``LookupError``.

The page protocol keeps its own per-request store next to this one
(see ``pagewire.inertia.state``).
"""

from contextvars import ContextVar

from pagewire.http.request import Request

request_var: ContextVar[Request] = ContextVar("pagewire_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()

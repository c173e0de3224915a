"""Middleware: any ``async def mw(request, next) -> Response`` callable.

Built-in:
    SessionMiddleware -- signed cookie sessions (itsdangerous)

The page protocol middleware lives with the rest of the protocol, as
``pagewire.inertia.middleware.InertiaMiddleware``.
"""

from pagewire.middleware.protocol import Middleware, Next
from pagewire.middleware.sessions import SessionConfig, SessionMiddleware, get_session

__all__ = [
    "Middleware",
    "Next",
    "SessionConfig",
    "SessionMiddleware",
    "get_session",
]

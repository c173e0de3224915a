"""Middleware protocol and the Next type alias.

A middleware is any callable shaped like::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class. The pipeline checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from pagewire.http.request import Request
from pagewire.http.response import Response

type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for pagewire middleware.

    Function or callable object::

        async def auth(request: Request, next: Next) -> Response:
            share("auth", {"user": await current_user(request)})
            return await next(request)
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...

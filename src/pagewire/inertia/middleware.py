"""Page protocol middleware.

Runs on every request, before the handler:

- ``GET`` protocol requests whose ``X-Inertia-Version`` differs from
  the app version are answered with ``409`` + ``X-Inertia-Location``
  without reaching the handler; the client reloads the page in full.
- Under ``SessionMiddleware``, flash data and validation error bags are
  consumed and shared as the ``flash`` and ``errors`` props. Both are
  consumed on every request so they never outlive one page.
- An unexpected exception on a protocol request, outside debug mode
  and under ``SessionMiddleware``, is logged, flashed as ``error`` and
  answered with a ``303`` back to the referring page. In debug mode it
  propagates to the HTML debug page, which the client shows in a modal.
- A ``ValidationError`` from the handler becomes flashed error bags
  and a ``303`` back to the form (see ``redirect_back_with_errors``).
- Every response gets ``Vary: X-Inertia``: the same URL serves HTML or
  JSON depending on that header.

Usage::

    app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))
    app.add_middleware(InertiaMiddleware())
"""

import logging

from pagewire.config import VersionProvider
from pagewire.errors import HTTPError, ValidationError
from pagewire.http.request import Request
from pagewire.http.response import Response
from pagewire.inertia import headers as protocol
from pagewire.inertia.flashes import consume_errors, consume_flash, flash, select_errors
from pagewire.inertia.redirect import BACK, location, redirect, redirect_back_with_errors
from pagewire.inertia.state import current_state
from pagewire.inertia.version import resolve_version, versions_match
from pagewire.middleware.protocol import Next
from pagewire.middleware.sessions import has_session

logger = logging.getLogger("pagewire.inertia")

SERVER_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class InertiaMiddleware:
    """Version check plus flash/error sharing.

    *version* overrides ``AppConfig.version`` for the check; leave it
    unset to use the app's configured version.
    """

    __slots__ = ("_version",)

    def __init__(self, version: VersionProvider | None = None) -> None:
        self._version = version

    async def __call__(self, request: Request, next: Next) -> Response:
        state = current_state()

        if request.is_inertia and request.method == "GET":
            current = resolve_version(self._version if self._version is not None else state.version)
            if not versions_match(request.inertia_version, current):
                logger.info(
                    "Asset version changed (client %s, server %s), reloading %s",
                    request.inertia_version,
                    current,
                    request.url,
                )
                return location(request.url, request).with_vary(protocol.INERTIA)

        if has_session():
            state.share("flash", consume_flash())
            bags = consume_errors()
        else:
            bags = {}
        state.share("errors", select_errors(bags, request.error_bag))

        try:
            response = await next(request)
        except ValidationError as exc:
            response = redirect_back_with_errors(request, exc.errors, bag=exc.bag)
        except HTTPError:
            raise
        except Exception:
            if not (request.is_inertia and has_session()) or state.debug:
                raise
            logger.exception("Server error on %s %s", request.method, request.path)
            flash("error", SERVER_ERROR_MESSAGE)
            response = redirect(BACK, request, status=303)
        return response.with_vary(protocol.INERTIA)

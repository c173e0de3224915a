"""Signed cookie sessions.

Session data is JSON, signed with ``itsdangerous``. The session dict
lives in a ContextVar for the duration of the request and is reachable
through ``get_session()``. Flash data and validation error bags for
the page protocol are stored here between a redirect and the next page.
"""

import logging
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadData, URLSafeTimedSerializer

from pagewire.errors import ConfigurationError
from pagewire.http.cookies import SetCookie
from pagewire.http.request import Request
from pagewire.http.response import Response
from pagewire.middleware.protocol import Next

logger = logging.getLogger("pagewire.sessions")

_session_var: ContextVar[dict[str, Any] | None] = ContextVar("pagewire_session", default=None)


def get_session() -> dict[str, Any]:
    """Return the current session dict.

    Raises ``LookupError`` outside a request with ``SessionMiddleware``.
    """
    session = _session_var.get()
    if session is None:
        msg = (
            "No active session. Ensure SessionMiddleware is added "
            "to the app before accessing the session."
        )
        raise LookupError(msg)
    return session


def has_session() -> bool:
    """True while a request runs under ``SessionMiddleware``."""
    return _session_var.get() is not None


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session cookie settings. ``secret_key`` is required: sessions are signed, not encrypted."""

    secret_key: str
    cookie_name: str = "pagewire_session"
    max_age: int = 86400  # 24 hours
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"


class SessionMiddleware:
    """Load the signed session cookie, expose it, write it back.

    An empty session sets no cookie; a session emptied during the
    request (for example by consuming its flash data) expires the cookie.

    Usage::

        app.add_middleware(SessionMiddleware(SessionConfig(secret_key="...")))
    """

    __slots__ = ("_config", "_serializer")

    def __init__(self, config: SessionConfig) -> None:
        if not config.secret_key:
            msg = "SessionConfig.secret_key must not be empty."
            raise ConfigurationError(msg)
        self._config = config
        self._serializer = URLSafeTimedSerializer(config.secret_key, salt="pagewire.session")

    def _load(self, raw: str | None) -> dict[str, Any]:
        if not raw:
            return {}
        try:
            data = self._serializer.loads(raw, max_age=self._config.max_age)
        except BadData:
            logger.debug("Discarding session cookie with a bad signature or payload")
            return {}
        return data if isinstance(data, dict) else {}

    def _cookie(self, value: str, max_age: int) -> SetCookie:
        cfg = self._config
        return SetCookie(
            name=cfg.cookie_name,
            value=value,
            max_age=max_age,
            path=cfg.path,
            secure=cfg.secure,
            httponly=cfg.httponly,
            samesite=cfg.samesite,
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        raw = request.cookies.get(self._config.cookie_name)
        session = self._load(raw)
        token = _session_var.set(session)
        try:
            response = await next(request)
        finally:
            _session_var.reset(token)

        if session:
            # Re-signed on every response so expiry slides with activity
            cookie = self._cookie(self._serializer.dumps(session), self._config.max_age)
        elif raw:
            cookie = self._cookie("", 0)
        else:
            return response
        return response.with_cookie(cookie)

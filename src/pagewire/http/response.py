"""HTTP response with a chainable ``.with_*()`` API, and the Redirect return type.

Each transformation returns a new Response. Middleware and the page
protocol add headers without ever mutating what a handler produced.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from pagewire.http.cookies import SetCookie


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Append a header. Existing headers with the same name are kept."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def with_cookie(self, cookie: SetCookie) -> Response:
        return replace(self, cookies=(*self.cookies, cookie))

    def without_cookie(self, name: str, path: str = "/") -> Response:
        """Expire *name* on the client (``Max-Age=0``)."""
        return self.with_cookie(SetCookie(name=name, value="", max_age=0, path=path))

    def with_vary(self, field_name: str) -> Response:
        """Add *field_name* to ``Vary``, merging with any existing value."""
        existing = [value for name, value in self.headers if name.lower() == "vary"]
        fields = [f.strip() for value in existing for f in value.split(",") if f.strip()]
        if field_name.lower() in (f.lower() for f in fields):
            return self
        others = tuple((n, v) for n, v in self.headers if n.lower() != "vary")
        return replace(self, headers=(*others, ("Vary", ", ".join([*fields, field_name]))))

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive), or *default*."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect returned from a handler.

    Leave *status* unset to let the page protocol choose it (``303``
    after ``PUT``/``PATCH``/``DELETE``, ``302`` otherwise). Pass
    ``"back"`` as *url* to return to the referring page.
    """

    url: str
    status: int | None = None
    headers: tuple[tuple[str, str], ...] = ()

"""Immutable HTTP request.

Frozen metadata with async body access. Everything the page protocol
needs to know about an inbound request (marker header, partial-reload
scope, client version) is a computed property here, derived once from
the headers.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl

from pagewire._internal.asgi import Receive
from pagewire.http.cookies import parse_cookies
from pagewire.http.headers import Headers
from pagewire.http.query import QueryParams
from pagewire.inertia import headers as protocol


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Body is read lazily through ``body()``, ``json()`` and ``form()``;
    the bytes are cached so middleware and handlers can both read them.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str] = field(default_factory=dict)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    cookies: Mapping[str, str] = field(default_factory=dict)
    raw_path: str = ""

    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Page protocol view --

    @property
    def is_inertia(self) -> bool:
        """True iff the protocol marker header is present."""
        return protocol.INERTIA in self.headers

    @property
    def inertia_version(self) -> str | None:
        """Asset version the client reports, if any."""
        return self.headers.get(protocol.VERSION)

    @property
    def partial_component(self) -> str | None:
        """Component named by a partial reload, if any."""
        return self.headers.get(protocol.PARTIAL_COMPONENT) or None

    @property
    def partial_only(self) -> tuple[str, ...]:
        return self.headers.get_csv(protocol.PARTIAL_DATA)

    @property
    def partial_except(self) -> tuple[str, ...]:
        return self.headers.get_csv(protocol.PARTIAL_EXCEPT)

    @property
    def reset_props(self) -> tuple[str, ...]:
        return self.headers.get_csv(protocol.RESET)

    @property
    def except_once_props(self) -> tuple[str, ...]:
        return self.headers.get_csv(protocol.EXCEPT_ONCE_PROPS)

    @property
    def error_bag(self) -> str | None:
        return self.headers.get(protocol.ERROR_BAG) or None

    def is_partial_for(self, component: str) -> bool:
        """True if this is a protocol request partially reloading *component*.

        A partial reload naming a different component is treated as a
        full request: the client state is stale, so it gets everything.
        """
        return self.is_inertia and self.partial_component == component

    # -- Plain HTTP view --

    @property
    def referer(self) -> str | None:
        return self.headers.get("referer") or None

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def target_path(self) -> str:
        """The path as the client sent it, still percent-encoded.

        ``path`` is the decoded form used for routing. Falls back to it
        when the server did not provide a raw path.
        """
        return self.raw_path or self.path

    @property
    def url(self) -> str:
        """Raw path plus the query string exactly as received."""
        if self.query.raw:
            return f"{self.target_path}?{self.query.raw.decode('latin-1')}"
        return self.target_path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Copy of this request carrying matched route parameters."""
        return replace(self, path_params=path_params)

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full body once; later calls return the cached bytes."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]

    async def stream(self) -> AsyncGenerator[bytes, None]:
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        return json_module.loads(await self.body())

    async def form(self) -> dict[str, str]:
        """Parse an urlencoded body. Repeated fields keep the last value."""
        if "form" not in self._cache:
            raw = await self.body()
            self._cache["form"] = dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
        return self._cache["form"]

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            raw_path=raw_path.decode("latin-1").partition("?")[0] if raw_path else "",
            _receive=receive,
        )

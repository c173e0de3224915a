"""Route definitions and their compiled path patterns.

Path templates use ``{name}`` for one segment and ``{name:path}`` for
the rest of the path::

    /users/{id}
    /files/{rest:path}

A trailing slash on the request path is tolerated, except for ``/``.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pagewire.errors import ConfigurationError

_PARAM = re.compile(r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<kind>str|path))?\}")


def compile_path(path: str) -> re.Pattern[str]:
    """Turn a path template into an anchored regular expression."""
    if not path.startswith("/"):
        msg = f"Route path must start with '/': {path!r}"
        raise ConfigurationError(msg)
    pattern = ""
    position = 0
    for param in _PARAM.finditer(path):
        pattern += re.escape(path[position : param.start()])
        segment = ".+" if param["kind"] == "path" else "[^/]+"
        pattern += f"(?P<{param['name']}>{segment})"
        position = param.end()
    pattern += re.escape(path[position:])
    return re.compile(f"^{pattern}/?$" if pattern != "/" else "^/$")


@dataclass(frozen=True, slots=True)
class Route:
    """One registered handler, bound to a path template and its methods.

    The template is compiled on construction, so a malformed path fails
    at registration rather than on the first request.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_path(self.path))

    def accepts(self, method: str) -> bool:
        """``HEAD`` is served by any route that serves ``GET``."""
        return method in self.methods or (method == "HEAD" and "GET" in self.methods)

    def params_for(self, path: str) -> dict[str, str] | None:
        """Raw path parameters if *path* fits this route, else ``None``."""
        found = self.pattern.match(path)
        return None if found is None else found.groupdict()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A route paired with the string parameters captured from the path."""

    route: Route
    path_params: dict[str, str]

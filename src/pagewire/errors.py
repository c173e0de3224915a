"""Pagewire exceptions.

Two families:

- ``HTTPError`` and its subclasses end a request with a status code.
  The pipeline hands them to ``@app.error()`` handlers or renders
  ``detail`` as a plain body.
- ``ValidationError`` ends a form submission. ``InertiaMiddleware``
  turns it into flashed error bags and a ``303`` back to the form.
"""

from collections.abc import Mapping
from typing import ClassVar


class PagewireError(Exception):
    """Base for all pagewire-specific errors."""


class ConfigurationError(PagewireError):
    """The app was set up wrongly: bad route path, empty root view, missing secret."""


class HTTPError(PagewireError):
    """Ends the request with ``status``.

    Subclasses fix the status as a class attribute; raise ``HTTPError``
    directly with ``status=`` for anything else::

        raise HTTPError("Payment required", status=402)
    """

    status: ClassVar[int] = 500

    def __init__(
        self,
        detail: str = "",
        *,
        status: int | None = None,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(detail)
        if status is not None:
            self.status = status  # type: ignore[misc]
        self.detail = detail
        self.headers = headers

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)


class NotFound(HTTPError):  # noqa: N818
    status = 404

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """The path exists, but not for this method. Sends ``Allow``."""

    status = 405

    def __init__(self, allowed: frozenset[str]) -> None:
        self.allowed = allowed
        allow = ", ".join(sorted(allowed))
        super().__init__(f"Method not allowed. Allowed methods: {allow}", headers=(("Allow", allow),))


class ValidationError(PagewireError):
    """Field errors for the form that was just submitted.

    Usage::

        if not form.get("email"):
            raise ValidationError({"email": "Required"})

    *bag* names the error bag; it defaults to the request's
    ``X-Inertia-Error-Bag``, then ``"default"``.
    """

    def __init__(self, errors: Mapping[str, str | list[str]], *, bag: str | None = None) -> None:
        super().__init__(f"{len(errors)} invalid field(s): {', '.join(errors)}")
        self.errors = dict(errors)
        self.bag = bag

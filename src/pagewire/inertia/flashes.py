"""Flash data and validation error bags, carried across redirects in the session.

Both are consumed by ``InertiaMiddleware`` on the next request and
shared with the page as the ``flash`` and ``errors`` props. Neither is
written to client history: a back-button visit does not replay them.
"""

from collections.abc import Mapping
from typing import Any

from pagewire.middleware.sessions import get_session

FLASH_KEY = "_pagewire_flash"
ERRORS_KEY = "_pagewire_errors"

type ErrorBags = dict[str, dict[str, str | list[str]]]


def flash(key: str | Mapping[str, Any], value: Any = None) -> None:
    """Flash one value, or a mapping of values, to the next page.

    Usage::

        flash("success", "Profile updated!")
        flash({"success": "Saved", "highlight": "billing"})
    """
    session = get_session()
    stored = dict(session.get(FLASH_KEY) or {})
    if isinstance(key, Mapping):
        stored.update(key)
    else:
        stored[key] = value
    session[FLASH_KEY] = stored


def consume_flash() -> dict[str, Any]:
    """Take (and clear) the flashed data."""
    return get_session().pop(FLASH_KEY, None) or {}


def flash_errors(errors: Mapping[str, str | list[str]], *, bag: str = "default") -> None:
    """Store field errors under *bag* for the next page.

    Single-message lists collapse to the message itself.
    """
    session = get_session()
    bags: ErrorBags = dict(session.get(ERRORS_KEY) or {})
    bags[bag] = {field: _collapse(messages) for field, messages in errors.items()}
    session[ERRORS_KEY] = bags


def consume_errors() -> ErrorBags:
    """Take (and clear) every flashed error bag."""
    return get_session().pop(ERRORS_KEY, None) or {}


def select_errors(bags: ErrorBags, error_bag: str | None) -> dict[str, Any]:
    """The ``errors`` prop for a request.

    With an ``X-Inertia-Error-Bag`` header: ``{bag: errors}`` for that
    bag (``{}`` if it has none). Without: the default bag's field errors.
    """
    if error_bag:
        return {error_bag: bags[error_bag]} if error_bag in bags else {}
    return dict(bags.get("default", {}))


def _collapse(messages: str | list[str]) -> str | list[str]:
    if isinstance(messages, list) and len(messages) == 1:
        return messages[0]
    return messages

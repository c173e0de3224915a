"""Page and Location return types.

Frozen dataclasses that handlers return. Content negotiation turns a
``Page`` into a page object (JSON or full HTML) and a ``Location`` into
a forced full-browser visit.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Page:
    """Render a client-side component with props.

    Usage::

        return Page("Users/Index", {"users": load_users, "filters": defer(load_filters)})

    *view_data* reaches the root HTML template only and is merged over
    anything shared with ``view_data()`` during the request.
    """

    component: str
    props: dict[str, Any] = field(default_factory=dict)
    view_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Location:
    """Send the browser somewhere with a full page load.

    Protocol requests get ``409`` with ``X-Inertia-Location``; plain
    requests get an ordinary redirect.

    Usage::

        return Location("https://billing.example.com/portal")
    """

    url: str

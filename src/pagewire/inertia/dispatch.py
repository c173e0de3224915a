"""Response dispatcher: JSON page object or full HTML document.

Two terminal branches, chosen by the request marker header:

- protocol request → ``X-Inertia: true``, ``Vary: Accept``, JSON body
- anything else    → root template rendered with ``page`` and ``viewData``

Both branches serialize the page through ``encode_page``, so the data
the HTML document boots from is byte-identical to what a JSON visit to
the same URL returns.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pagewire.errors import ConfigurationError
from pagewire.http.response import Response
from pagewire.inertia import headers as protocol
from pagewire.inertia.page import PageObject

if TYPE_CHECKING:
    from kida import Environment

    from pagewire.http.request import Request


def encode_page(page: PageObject) -> str:
    """Serialize a page object to its JSON wire form."""
    return json_module.dumps(page.to_dict(), default=str, separators=(",", ":"))


def respond(
    page: PageObject,
    view_data: Mapping[str, Any] | None,
    request: Request,
    *,
    kida_env: Environment | None = None,
    root_view: str = "app.html",
) -> Response:
    """Emit *page* in the format *request* expects."""
    if request.is_inertia:
        return (
            Response(body=encode_page(page), content_type="application/json")
            .with_header(protocol.INERTIA, "true")
            .with_vary("Accept")
        )

    if kida_env is None:
        msg = (
            "Full-page loads render the root view through kida. "
            "Ensure a template_dir is configured in AppConfig."
        )
        raise ConfigurationError(msg)

    template = kida_env.get_template(root_view)
    html = template.render(
        {
            "page": page,
            "viewData": dict(view_data if view_data is not None else page.view_data),
        }
    )
    return Response(body=html, content_type="text/html; charset=utf-8")

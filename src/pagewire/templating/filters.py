"""Template helpers for the root document.

A root template boots the client from the page object::

    <body>
      {{ page_root(page, id=root_element_id) }}
    </body>

or, for custom markup::

    <div id="app" data-page="{{ page | page_json }}"></div>
"""

import html
from typing import Any

from kida.template import Markup

from pagewire.inertia.dispatch import encode_page
from pagewire.inertia.page import PageObject


def page_json(page: PageObject) -> Markup:
    """The page object as attribute-safe JSON.

    Same bytes as the JSON response body, HTML-escaped for use inside a
    quoted attribute.
    """
    return Markup(html.escape(encode_page(page), quote=True))


def page_root(page: PageObject, id: str = "app", tag: str = "div") -> Markup:  # noqa: A002
    """The element the client mounts onto, carrying ``data-page``."""
    return Markup(
        f'<{tag} id="{html.escape(id, quote=True)}" data-page="{page_json(page)}"></{tag}>'
    )


BUILTIN_FILTERS: dict[str, Any] = {
    "page_json": page_json,
}

BUILTIN_GLOBALS: dict[str, Any] = {
    "page_root": page_root,
}

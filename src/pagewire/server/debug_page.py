"""Debug error page, shown instead of a bare 500 when ``debug=True``.

Plain self-contained HTML. The SPA client shows non-protocol responses
to protocol requests in an error modal, so the same page serves both
full loads and client-side visits.
"""

import html
import traceback

from pagewire.http.request import Request


def render_debug_page(exc: BaseException, request: Request) -> str:
    frames = "".join(traceback.format_exception(exc))
    title = f"{type(exc).__name__}: {exc}"
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{html.escape(title)}</title>"
        "<style>body{font-family:system-ui,sans-serif;margin:2rem;background:#1a1b26;color:#c0caf5}"
        "h1{color:#f7768e;font-size:1.25rem}pre{white-space:pre-wrap;font-size:.85rem}</style>"
        "</head><body>"
        f"<h1>{html.escape(title)}</h1>"
        f"<p>{html.escape(request.method)} {html.escape(request.url)}</p>"
        f"<pre>{html.escape(frames)}</pre>"
        "</body></html>"
    )

"""Page object builder.

Produces the wire payload for a navigation: which client component to
render, with which resolved props, at which URL and asset version.
It never decides the output format; see ``dispatch``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagewire.config import VersionProvider, VersionValue
from pagewire.inertia.resolve import resolve
from pagewire.inertia.state import SharedState
from pagewire.inertia.version import resolve_version

if TYPE_CHECKING:
    from pagewire.http.request import Request


@dataclass(frozen=True, slots=True)
class PageObject:
    """The serialized unit the SPA client renders from.

    ``view_data`` rides along for the root template and is never
    serialized.
    """

    component: str
    props: dict[str, Any]
    url: str
    version: VersionValue
    clear_history: bool = False
    encrypt_history: bool = False
    merge_props: tuple[str, ...] = ()
    deep_merge_props: tuple[str, ...] = ()
    deferred_props: dict[str, list[str]] = field(default_factory=dict)
    once_props: dict[str, dict[str, Any]] = field(default_factory=dict)
    view_data: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Wire format. Optional metadata keys are omitted when empty."""
        data: dict[str, Any] = {
            "component": self.component,
            "props": self.props,
            "url": self.url,
            "version": self.version,
            "clearHistory": self.clear_history,
            "encryptHistory": self.encrypt_history,
        }
        if self.merge_props:
            data["mergeProps"] = list(self.merge_props)
        if self.deep_merge_props:
            data["deepMergeProps"] = list(self.deep_merge_props)
        if self.deferred_props:
            data["deferredProps"] = self.deferred_props
        if self.once_props:
            data["onceProps"] = self.once_props
        return data


def page_url(request: Request) -> str:
    """The URL the browser shows for this page.

    The path as the client sent it (percent-encoding intact), plus the
    re-encoded query string on ``GET`` requests.
    """
    if request.method == "GET" and request.query:
        return f"{request.target_path}?{request.query.encode()}"
    return request.target_path


async def build_page(
    component: str,
    props: Mapping[str, Any],
    view_data: Mapping[str, Any] | None,
    request: Request,
    *,
    state: SharedState | None = None,
    version: VersionProvider | None = None,
) -> PageObject:
    """Build the page object for *component*.

    Shared entries and view-data come from *state* (the request's store);
    page entries override shared ones with the same key. *version*
    defaults to the one the store was seeded with. Any resolver failure
    propagates and no page object is produced.
    """
    state = state or SharedState()
    resolved = await resolve(
        state.get(),
        props,
        request,
        component,
        refreshed_once=state.refreshed_once,
    )
    return PageObject(
        component=component,
        props=resolved.props,
        url=page_url(request),
        version=resolve_version(state.version if version is None else version),
        clear_history=state.clear_history,
        encrypt_history=state.encrypt_history,
        merge_props=resolved.merge_props,
        deep_merge_props=resolved.deep_merge_props,
        deferred_props=resolved.deferred_props,
        once_props=resolved.once_props,
        view_data={**state.get_view_data(), **(view_data or {})},
    )

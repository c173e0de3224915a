"""Prop resolution engine.

Turns a prop graph (shared entries + page entries) into the plain
``props`` mapping of a page object, for one request.

Pipeline::

    shared ∪ page            page entries win on key collisions
      → pick                 partial-reload filtering + variant rules
      → resolve              call resolvers concurrently, await results
      → ResolvedProps        plain values + merge/deferred/once metadata

Partial filtering only applies when the request is a protocol request
whose ``X-Inertia-Partial-Component`` equals the component being built.
Otherwise the client gets the full set (minus deferred/optional props),
whatever the partial headers say.

Resolvers must not depend on each other's results: they run in one
anyio task group and the first failure cancels the rest and propagates
unchanged, so a failing build never yields a partial page.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import anyio

from pagewire._internal.invoke import invoke, positional_arity
from pagewire.inertia.props import Prop, PropKind, as_prop

if TYPE_CHECKING:
    from pagewire.http.request import Request

logger = logging.getLogger("pagewire.inertia")


@dataclass(frozen=True, slots=True)
class ResolveContext:
    """Explicit input for resolvers that take one argument.

    Everything a resolver may need from its surroundings is here, so a
    resolver is a plain function of this context and testable alone.
    """

    request: Request
    component: str
    shared: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolvedProps:
    """Result of a resolution pass. Every value in ``props`` is plain."""

    props: dict[str, Any]
    merge_props: tuple[str, ...] = ()
    deep_merge_props: tuple[str, ...] = ()
    deferred_props: dict[str, list[str]] = field(default_factory=dict)
    once_props: dict[str, dict[str, Any]] = field(default_factory=dict)


def merge_graph(shared: Mapping[str, Any], page: Mapping[str, Any]) -> dict[str, Prop]:
    """Combine shared and page entries; page entries override shared ones."""
    graph = {key: as_prop(entry) for key, entry in shared.items()}
    graph.update((key, as_prop(entry)) for key, entry in page.items())
    return graph


def pick_props(
    graph: Mapping[str, Prop],
    request: Request,
    component: str,
    *,
    page_keys: frozenset[str] | set[str],
    refreshed_once: tuple[str, ...] = (),
) -> dict[str, Prop]:
    """Select the entries this request should receive.

    - ``ALWAYS`` entries are always kept.
    - ``DEFERRED`` / ``OPTIONAL`` entries are kept only when a partial
      reload of this component names them in its ``only`` list.
    - ``ONCE`` entries are dropped when the client already holds them,
      unless marked fresh, refreshed for this request, or named explicitly.
    - On a partial reload of this component, page-specific entries are
      narrowed by ``only`` and ``except``. Shared entries are left alone.
    """
    partial = request.is_partial_for(component)
    only = set(request.partial_only) if partial else set()
    excluded = set(request.partial_except) if partial else set()
    client_holds = set(request.except_once_props)

    picked: dict[str, Prop] = {}
    for key, prop in graph.items():
        match prop.kind:
            case PropKind.ALWAYS:
                picked[key] = prop
                continue
            case PropKind.DEFERRED | PropKind.OPTIONAL:
                if key not in only:
                    continue
            case PropKind.ONCE:
                held = (prop.key or key) in client_holds
                if held and not prop.refresh and key not in refreshed_once and key not in only:
                    continue
            case PropKind.PLAIN | PropKind.MERGE:
                pass

        if partial and key in page_keys:
            if only and key not in only:
                continue
            if key in excluded:
                continue
        picked[key] = prop
    return picked


def collect_metadata(
    graph: Mapping[str, Prop],
    picked: Mapping[str, Prop],
    request: Request,
    component: str,
) -> dict[str, Any]:
    """Client-side bookkeeping that travels next to ``props``.

    Merge lists cover the picked entries minus ``X-Inertia-Reset``;
    deferred groups are only announced on non-partial builds; once
    metadata covers every once entry in the graph.
    """
    reset = set(request.reset_props)
    merge_props = tuple(
        key for key, prop in picked.items() if prop.merge == "shallow" and key not in reset
    )
    deep_merge_props = tuple(
        key for key, prop in picked.items() if prop.merge == "deep" and key not in reset
    )

    deferred_props: dict[str, list[str]] = {}
    if not request.is_partial_for(component):
        for key, prop in graph.items():
            if prop.kind is PropKind.DEFERRED:
                deferred_props.setdefault(prop.group, []).append(key)

    now_ms = int(time.time() * 1000)
    once_props = {
        (prop.key or key): {
            "prop": key,
            "expiresAt": None if prop.ttl is None else now_ms + int(prop.ttl * 1000),
        }
        for key, prop in graph.items()
        if prop.kind is PropKind.ONCE
    }
    return {
        "merge_props": merge_props,
        "deep_merge_props": deep_merge_props,
        "deferred_props": deferred_props,
        "once_props": once_props,
    }


async def resolve_value(prop: Prop, context: ResolveContext) -> Any:
    """Unwrap one entry to its plain value."""
    value = prop.value
    if callable(value):
        if positional_arity(value) == 0:
            return await invoke(value)
        return await invoke(value, context)
    if inspect.isawaitable(value):
        return await value
    return value


async def resolve_values(picked: Mapping[str, Prop], context: ResolveContext) -> dict[str, Any]:
    """Resolve every picked entry concurrently, keeping graph order.

    The first resolver failure cancels the others and is re-raised as
    the original exception, not wrapped in an ``ExceptionGroup``.
    """
    results: dict[str, Any] = {}

    async def _resolve(key: str, prop: Prop) -> None:
        try:
            results[key] = await resolve_value(prop, context)
        except Exception:
            logger.debug("prop %r failed to resolve for %s", key, context.component)
            raise

    try:
        async with anyio.create_task_group() as tg:
            for key, prop in picked.items():
                tg.start_soon(_resolve, key, prop)
    except ExceptionGroup as group:
        raise _first_leaf(group) from None

    return {key: results[key] for key in picked}


async def resolve(
    shared: Mapping[str, Any],
    page: Mapping[str, Any],
    request: Request,
    component: str,
    *,
    refreshed_once: tuple[str, ...] = (),
) -> ResolvedProps:
    """Produce the resolved prop map for *component* under *request*."""
    graph = merge_graph(shared, page)
    picked = pick_props(
        graph,
        request,
        component,
        page_keys=frozenset(page),
        refreshed_once=refreshed_once,
    )
    context = ResolveContext(request=request, component=component, shared=dict(shared))
    props = await resolve_values(picked, context)
    return ResolvedProps(props=props, **collect_metadata(graph, picked, request, component))


def _first_leaf(group: BaseExceptionGroup[Any]) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc

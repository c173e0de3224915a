"""Prop variants: a closed tagged union.

Every entry in a page's prop graph is either a plain value, a resolver
(a callable producing the value), or a ``Prop`` wrapper tagging it with
a ``PropKind``. The resolution engine matches on the kind; there is no
subclass hierarchy and no behavior on the wrapper itself.

Usage::

    from pagewire.inertia import always, defer, merge, once

    return Page("Dashboard/Index", props={
        "user": current_user,                       # plain
        "stats": defer(load_stats, group="charts"),  # sent later
        "feed": merge(load_feed),                   # client appends
        "csrf": always(lambda: token),              # survives partial reloads
        "plans": once(load_plans).until(3600),      # cached client-side
    })

Resolvers take no arguments, or one: the ``ResolveContext`` for the
build in progress.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Literal

type MergeStrategy = Literal["shallow", "deep"]


class PropKind(StrEnum):
    """How and when a prop is included in a page build."""

    PLAIN = "plain"
    ALWAYS = "always"  # included even when a partial reload did not ask for it
    MERGE = "merge"  # client merges the value into its existing state
    DEFERRED = "deferred"  # never on first load; fetched by a later partial reload
    OPTIONAL = "optional"  # like DEFERRED, but the client is not told about it
    ONCE = "once"  # skipped when the client says it already holds the value


@dataclass(frozen=True, slots=True)
class Prop:
    """A tagged prop entry.

    ``value`` is either the value itself or a resolver. Immutable; the
    chainable methods return new instances.
    """

    kind: PropKind
    value: Any
    group: str = "default"
    merge: MergeStrategy | None = None
    key: str | None = None
    ttl: float | None = None
    refresh: bool = False

    # -- Merge metadata (MERGE and DEFERRED) --

    def merged(self) -> Prop:
        """Ask the client to shallow-merge (append) this prop."""
        return replace(self, merge="shallow")

    def deep_merged(self) -> Prop:
        """Ask the client to merge nested objects recursively."""
        return replace(self, merge="deep")

    # -- Once options --

    def as_key(self, key: str) -> Prop:
        """Cache under *key* instead of the prop name, so pages can share it."""
        return replace(self, key=key)

    def until(self, seconds: float) -> Prop:
        """Let the client keep the value for *seconds*."""
        return replace(self, ttl=seconds)

    def fresh(self, value: bool = True) -> Prop:
        """Send the value even if the client claims to hold it."""
        return replace(self, refresh=value)


def always(value: Any) -> Prop:
    """Include this prop in every build, partial reloads included."""
    return Prop(PropKind.ALWAYS, value)


def merge(value: Any) -> Prop:
    """Tag a prop so the client merges rather than replaces it."""
    return Prop(PropKind.MERGE, value, merge="shallow")


def deep_merge(value: Any) -> Prop:
    """Like ``merge`` but recursive on nested objects."""
    return Prop(PropKind.MERGE, value, merge="deep")


def defer(value: Any, group: str = "default") -> Prop:
    """Leave this prop out of the first load.

    The client is told which deferred props exist (by *group*) and
    fetches each group with a partial reload naming its keys.
    """
    return Prop(PropKind.DEFERRED, value, group=group)


def optional(value: Any) -> Prop:
    """Only resolve this prop when a partial reload names it."""
    return Prop(PropKind.OPTIONAL, value)


def once(value: Any) -> Prop:
    """Resolve once per client; later visits skip it while the client has it."""
    return Prop(PropKind.ONCE, value)


def as_prop(entry: Any) -> Prop:
    """Normalize a graph entry: untagged values become ``PLAIN``."""
    if isinstance(entry, Prop):
        return entry
    return Prop(PropKind.PLAIN, entry)

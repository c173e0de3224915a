"""Kida environment setup.

The app builds (or adopts) exactly one kida ``Environment`` when it
freezes. Whichever way it was obtained, the environment gets the
page-object helpers a root template needs plus the user's filters and
globals, and is treated as read-only afterwards.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from pagewire.config import AppConfig
from pagewire.templating.filters import BUILTIN_FILTERS, BUILTIN_GLOBALS


def create_environment(
    config: AppConfig,
    filters: Mapping[str, Callable[..., Any]],
    globals_: Mapping[str, Any],
) -> Environment:
    """Build an environment that loads templates from ``config.template_dir``."""
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    return configure_environment(
        env, filters, globals_, root_element_id=config.root_element_id
    )


def configure_environment(
    env: Environment,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
    *,
    root_element_id: str = "app",
) -> Environment:
    """Register ``page_json``/``page_root`` and the user's extras on *env*.

    User filters and globals are applied last and may shadow the
    built-in helpers.
    """
    env.update_filters({**BUILTIN_FILTERS, **(filters or {})})
    template_globals = {
        **BUILTIN_GLOBALS,
        "root_element_id": root_element_id,
        **(globals_ or {}),
    }
    for name, value in template_globals.items():
        env.add_global(name, value)
    return env

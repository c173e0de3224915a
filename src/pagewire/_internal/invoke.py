"""Call sync or async user callables uniformly.

Route handlers, error handlers, and prop resolvers can all be ``def``
or ``async def``. The sync/async check lives here and nowhere else.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def positional_arity(func: Any) -> int:
    """Number of positional parameters *func* accepts (``-1`` for ``*args``).

    Used to decide whether a callable wants an explicit context argument.
    Builtins without an introspectable signature count as zero.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return 0
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return -1
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ) and param.default is inspect.Parameter.empty:
            count += 1
    return count

"""Call user code that may be ``def`` or ``async def``.

Handlers and error handlers may be either; render functions may not,
so the renderer never goes through here.
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result once if it is awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

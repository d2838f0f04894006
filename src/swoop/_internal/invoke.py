"""Invoke helpers — call sync or async callables uniformly.

Handlers, middleware, and error handlers can be ``def`` or ``async def``.
Any code that calls a user-provided callable must handle both cases.
This module keeps the sync/async check in exactly one place.

Usage::

    from swoop._internal.invoke import invoke

    result = await invoke(handler, request, response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    A sync middleware continues the chain by returning ``next()``;
    the returned coroutine is awaited here::

        def tag(request, response, next):
            response.set_header("X-Tag", "1")
            return next()
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result

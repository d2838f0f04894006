"""Shared type aliases used across swoop modules."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from swoop.http.request import Request
    from swoop.http.response import Response

# Continues the middleware chain; awaiting it runs every later stage
Next: TypeAlias = Callable[[], Awaitable[None]]

# Terminal route handler — (request, response), sync or async
RequestHandler: TypeAlias = Callable[["Request", "Response"], Any]

# Middleware — (request, response, next), sync or async
MiddlewareFunc: TypeAlias = Callable[["Request", "Response", Next], Any]

# Error handler — (error, request, response), expected to end the response
ErrorHandler: TypeAlias = Callable[[BaseException, "Request", "Response"], Any]

# Not-found handler — (request, response)
NotFoundHandler: TypeAlias = Callable[["Request", "Response"], Any]

# Custom path matcher — receives the full request
PathPredicate: TypeAlias = Callable[["Request"], bool]

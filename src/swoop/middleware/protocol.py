"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, response: Response, next: Next) -> None: ...

No base class required. The framework checks the shape, not the lineage.
"""

from typing import Any, Protocol

from swoop._internal.types import Next
from swoop.http.request import Request
from swoop.http.response import Response


class Middleware(Protocol):
    """Protocol for swoop middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, response: Response, next: Next) -> None:
            start = time.monotonic()
            response.set_header("X-Started", f"{start:.3f}")
            await next()

        # Class middleware
        class RequireToken:
            async def __call__(self, request, response, next) -> None:
                if request.headers.get("authorization") != self.token:
                    await response.write_head(401)
                    await response.end()
                    return
                await next()
    """

    def __call__(self, request: Request, response: Response, next: Next) -> Any: ...


__all__ = ["Middleware", "Next"]

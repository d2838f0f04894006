"""Middleware — plain callables with explicit continuation.

A middleware is any callable matching::

    async def mw(request: Request, response: Response, next: Next) -> None

Awaiting ``next()`` runs the rest of the chain; returning without
calling it ends the chain early.
"""

from swoop.middleware.chain import merge_handler
from swoop.middleware.protocol import Middleware, Next

__all__ = [
    "Middleware",
    "Next",
    "merge_handler",
]

"""Handler chain composition.

``merge_handler`` folds an ordered middleware list and a terminal handler
into one request handler. The chain runs as an async pipeline: each stage
receives a fresh ``next`` bound to the following stage, and awaiting it
runs everything downstream.

Composition nests. A handler already merged with route-scoped middleware
can be merged again with the global list, giving::

    global[0] -> global[1] -> ... -> route[0] -> ... -> handler
"""

from collections.abc import Callable, Sequence

from swoop._internal.invoke import invoke
from swoop._internal.types import ErrorHandler, MiddlewareFunc, RequestHandler
from swoop.errors import ErrorHandlerFailure
from swoop.http.request import Request
from swoop.http.response import Response
from swoop.server.errors import call_error_handler


def merge_handler(
    handler: RequestHandler,
    middleware: Sequence[MiddlewareFunc],
    get_error_handler: Callable[[], ErrorHandler],
) -> RequestHandler:
    """Compose *middleware* around *handler*.

    The error handler is looked up through *get_error_handler* at failure
    time, so replacing it never requires recompiling chains.

    Contract of the returned handler:

    - stages run strictly in list order, then *handler*
    - a stage that returns without awaiting ``next()`` ends the chain
    - a failure in any stage goes to the error handler once, right where it
      is raised; later stages never run and earlier stages see ``next()``
      return normally
    - ``next()`` may be awaited at most once per stage
    """
    stages = tuple(middleware)

    async def merged(request: Request, response: Response) -> None:
        async def run(index: int) -> None:
            if index == len(stages):
                await invoke(handler, request, response)
                return

            called = False

            async def next_() -> None:
                nonlocal called
                if called:
                    msg = f"next() called multiple times by middleware {stages[index]!r}"
                    raise RuntimeError(msg)
                called = True
                # Downstream failures are reported here, where they happen;
                # the awaiting stage only sees next() return.
                try:
                    await run(index + 1)
                except ErrorHandlerFailure:
                    raise
                except Exception as exc:
                    await call_error_handler(get_error_handler(), exc, request, response)

            await invoke(stages[index], request, response, next_)

        try:
            await run(0)
        except ErrorHandlerFailure:
            raise
        except Exception as exc:
            await call_error_handler(get_error_handler(), exc, request, response)

    merged.__wrapped__ = handler  # type: ignore[attr-defined]
    return merged


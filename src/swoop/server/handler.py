"""ASGI handler — the request dispatcher.

The only component that touches raw ASGI request scopes. Builds the
``Request``/``Response`` pair, selects the first matching compiled route
(or the not-found handler), and funnels any failure to the error handler.

Per request::

    Received -> Matching -> Handling | NotFound -> Completed
                                     \\-> Erroring -> Completed
"""

import logging

from swoop._internal.asgi import Receive, Scope, Send
from swoop._internal.invoke import invoke
from swoop._internal.types import ErrorHandler, NotFoundHandler
from swoop.context import request_scope
from swoop.errors import ErrorHandlerFailure
from swoop.http.request import Request
from swoop.http.response import Response
from swoop.routing.table import CompiledRouteTable
from swoop.server.errors import call_error_handler

logger = logging.getLogger("swoop.server")


async def dispatch(
    request: Request,
    response: Response,
    *,
    table: CompiledRouteTable,
    not_found_handler: NotFoundHandler,
    error_handler: ErrorHandler,
) -> None:
    """Run one request against a compiled table.

    An ``ErrorHandlerFailure`` escapes to the caller; every other failure,
    including one from the not-found handler, goes to *error_handler*.
    """
    try:
        route = table.find(request)
        if route is not None:
            await invoke(route.handler, request, response)
        else:
            await invoke(not_found_handler, request, response)
    except ErrorHandlerFailure:
        raise
    except Exception as exc:
        await call_error_handler(error_handler, exc, request, response)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: CompiledRouteTable,
    not_found_handler: NotFoundHandler,
    error_handler: ErrorHandler,
) -> None:
    """Process a single HTTP request through the full pipeline.

    The table and both handler slots are captured by the caller when the
    request arrives; registration calls made meanwhile affect only later
    requests.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = Response(send)

    with request_scope(request):
        try:
            await dispatch(
                request,
                response,
                table=table,
                not_found_handler=not_found_handler,
                error_handler=error_handler,
            )
        except ErrorHandlerFailure:
            logger.critical("Error handler failed for %s %s", request.method, request.path)
            raise

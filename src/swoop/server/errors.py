"""Error funnel and default handlers.

Every request-time failure reaches the configured error handler through
``call_error_handler``, at most once per request. The defaults below are
what an ``App`` uses until ``set_error_handler`` / ``set_not_found_handler``
replace them.
"""

import logging

from swoop._internal.invoke import invoke
from swoop._internal.types import ErrorHandler
from swoop.errors import ErrorHandlerFailure, HTTPError
from swoop.http.request import Request
from swoop.http.response import Response

logger = logging.getLogger("swoop.server")


async def call_error_handler(
    handler: ErrorHandler,
    error: Exception,
    request: Request,
    response: Response,
) -> None:
    """Route *error* to *handler* unless this request already reported one.

    A failure raised by the handler itself is wrapped in
    ``ErrorHandlerFailure`` so outer chains and the dispatcher let it
    propagate instead of reporting it again.
    """
    if response._error_reported:
        logger.warning(
            "Further failure in %s %s after the error handler ran",
            request.method,
            request.path,
            exc_info=error,
        )
        return
    response._error_reported = True

    try:
        await invoke(handler, error, request, response)
    except Exception as failure:
        msg = (
            f"Error handler failed while handling {type(error).__name__} "
            f"for {request.method} {request.path}"
        )
        raise ErrorHandlerFailure(msg) from failure


async def default_error_handler(
    error: BaseException,
    request: Request,
    response: Response,
) -> None:
    """Log the failure and close the response with an error status.

    ``HTTPError`` keeps its own status and headers; anything else is a 500.
    Writes a status only if none has been sent yet. Never raises.
    """
    if isinstance(error, HTTPError):
        logger.debug("%d %s %s: %s", error.status, request.method, request.path, error.detail)
        status, headers = error.status, error.headers
    else:
        logger.error("500 %s %s", request.method, request.path, exc_info=error)
        status, headers = 500, ()

    try:
        if not response.headers_sent:
            await response.write_head(status, headers)
        if not response.finished:
            await response.end()
    except Exception:
        logger.exception("Could not send error response for %s %s", request.method, request.path)


async def default_not_found_handler(request: Request, response: Response) -> None:
    """Close the response with 404. Never raises."""
    logger.debug("404 %s %s", request.method, request.path)
    try:
        if not response.headers_sent:
            await response.write_head(404)
        if not response.finished:
            await response.end()
    except Exception:
        logger.exception("Could not send 404 response for %s %s", request.method, request.path)

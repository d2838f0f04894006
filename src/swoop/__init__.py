"""Swoop — a small HTTP routing layer with ordered middleware.

Routes are matched per HTTP method, first match wins. Global middleware
wraps every route; route-scoped middleware runs closest to the handler.

Basic usage::

    import asyncio

    from swoop import App

    app = App()

    async def hello(request, response):
        response.set_header("Content-Type", "text/plain")
        await response.end("Hello, World!")

    app.get("/", hello)
    app.static("/static", "./public")

    async def main():
        await app.listen(3000)
        await app.instance.wait_closed()

    asyncio.run(main())
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "AppConfig",
    "ErrorHandlerFailure",
    "HTTPError",
    "InvalidArgument",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "RouteOptions",
    "SwoopError",
    "TransportFailure",
    "g",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import swoop`` fast while providing a clean top-level API.
    """
    if name == "App":
        from swoop.app import App

        return App

    if name == "AppConfig":
        from swoop.config import AppConfig

        return AppConfig

    if name == "Request":
        from swoop.http.request import Request

        return Request

    if name == "Response":
        from swoop.http.response import Response

        return Response

    if name == "RouteOptions":
        from swoop.routing.route import RouteOptions

        return RouteOptions

    if name in ("Middleware", "Next"):
        from swoop.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("g", "get_request"):
        from swoop import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ErrorHandlerFailure",
        "HTTPError",
        "InvalidArgument",
        "NotFound",
        "SwoopError",
        "TransportFailure",
    ):
        from swoop import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

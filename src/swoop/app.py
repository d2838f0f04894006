"""Swoop application class.

Holds all per-instance routing state: the raw route table, the global
middleware list, the compiled snapshot the dispatcher reads, both handler
slots, and the listener while one is bound. Nothing is shared between
instances.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from typing import Any, Self

from swoop._internal.asgi import Receive, Scope, Send
from swoop._internal.types import ErrorHandler, MiddlewareFunc, NotFoundHandler, RequestHandler
from swoop.config import AppConfig
from swoop.errors import InvalidArgument, TransportFailure
from swoop.middleware.chain import merge_handler
from swoop.routing.matcher import PathSpec, compile_matcher
from swoop.routing.route import (
    OptionsOrMiddleware,
    Route,
    check_handler,
    check_middleware,
    normalize_options,
)
from swoop.routing.table import HTTP_METHODS, CompiledRouteTable, RouteTable, compile_table
from swoop.server.errors import default_error_handler, default_not_found_handler
from swoop.server.handler import handle_request
from swoop.server.listener import Listener


# Default for the handler argument of the two-argument call shape
_MISSING: Any = object()


def _check_method(method: Any) -> str:
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        msg = f"method must be one of {', '.join(HTTP_METHODS)}, not {method!r}"
        raise InvalidArgument(msg)
    return method.upper()


def _check_port(port: Any) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        msg = f"port must be an integer, not {type(port).__name__}"
        raise InvalidArgument(msg)
    if not 0 <= port <= 65535:
        msg = f"port must be between 0 and 65535, not {port}"
        raise InvalidArgument(msg)
    return port


class App:
    """The swoop application.

    Register routes per HTTP method, add global middleware, then serve::

        app = App()
        app.use(log_requests)
        app.get("/", index)
        app.post("/items", [require_login], create_item)
        await app.listen(3000)

    Every registration call returns the app, so calls chain. Each one
    rebuilds the compiled route table immediately; requests always run
    against the latest snapshot and never resolve middleware themselves.

    An ``App`` is also a plain ASGI 3 application and can be mounted in
    any ASGI server instead of using ``listen()``.
    """

    __slots__ = (
        "_compiled",
        "_error_handler",
        "_listener",
        "_middleware",
        "_not_found_handler",
        "_routes",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._routes = RouteTable()
        self._middleware: tuple[MiddlewareFunc, ...] = ()
        self._error_handler: ErrorHandler = default_error_handler
        self._not_found_handler: NotFoundHandler = default_not_found_handler
        self._listener: Listener | None = None

        # Compiled state — replaced wholesale on every mutation
        self._compiled = CompiledRouteTable()

    # -- Route registration --

    def register(
        self,
        method: str,
        path: PathSpec,
        options_or_handler: OptionsOrMiddleware | RequestHandler,
        handler: Any = _MISSING,
    ) -> Self:
        """Register *handler* for *method* requests matching *path*.

        Two call shapes::

            app.register("GET", "/", handler)
            app.register("GET", "/", options_or_middleware, handler)

        *path* is a non-empty string (exact match), a compiled regular
        expression (searched), or a callable receiving the request.
        Route-scoped middleware always runs after every global middleware
        and before *handler*.

        Raises ``InvalidArgument`` before changing anything if an
        argument is malformed.
        """
        method = _check_method(method)
        if handler is _MISSING:
            options, handler = None, options_or_handler
        else:
            options = options_or_handler

        matcher = compile_matcher(path)
        check_handler(handler)
        route_options = normalize_options(options)  # type: ignore[arg-type]

        if route_options.use:
            handler = merge_handler(handler, route_options.use, self._get_error_handler)

        self._routes.add(method, Route(matcher=matcher, handler=handler))
        self._recompile()
        return self

    def connect(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("CONNECT", path, options_or_handler, handler)

    def delete(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("DELETE", path, options_or_handler, handler)

    def get(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("GET", path, options_or_handler, handler)

    def head(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("HEAD", path, options_or_handler, handler)

    def options(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("OPTIONS", path, options_or_handler, handler)

    def patch(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("PATCH", path, options_or_handler, handler)

    def post(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("POST", path, options_or_handler, handler)

    def put(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("PUT", path, options_or_handler, handler)

    def trace(self, path: PathSpec, options_or_handler: Any, handler: Any = _MISSING) -> Self:
        return self.register("TRACE", path, options_or_handler, handler)

    def route(
        self,
        path: PathSpec,
        *,
        methods: Iterable[str] = ("GET",),
        use: OptionsOrMiddleware | None = None,
    ) -> Callable[[RequestHandler], RequestHandler]:
        """Register a handler via decorator.

        Usage::

            @app.route("/items", methods=["GET", "HEAD"], use=[require_login])
            async def items(request, response):
                await response.end("[]")
        """
        verbs = [methods] if isinstance(methods, str) else list(methods)
        checked = [_check_method(m) for m in verbs]

        def decorator(func: RequestHandler) -> RequestHandler:
            compile_matcher(path)
            check_handler(func)
            normalize_options(use)
            for method in checked:
                self.register(method, path, use, func)  # type: ignore[arg-type]
            return func

        return decorator

    # -- Middleware --

    def use(self, *middleware: MiddlewareFunc) -> Self:
        """Append global middleware, in call order, to every route."""
        check_middleware(middleware)
        self._middleware = (*self._middleware, *middleware)
        self._recompile()
        return self

    # -- Static files --

    def static(
        self,
        base_path: str,
        root_dir: str | os.PathLike[str],
        cache: bool | None = None,
    ) -> Self:
        """Serve files below *root_dir* for GET paths starting with *base_path*.

        *cache* defaults to ``config.static_cache``. See ``swoop.server.static``.
        """
        from swoop.server.static import add_static

        if cache is None:
            cache = self.config.static_cache
        add_static(self, base_path, root_dir, cache, chunk_size=self.config.static_chunk_size)
        return self

    # -- Handler slots --

    def set_error_handler(self, handler: ErrorHandler) -> Self:
        """Replace the error handler: ``(error, request, response)``."""
        check_handler(handler)
        self._error_handler = handler
        return self

    def set_not_found_handler(self, handler: NotFoundHandler) -> Self:
        """Replace the not-found handler: ``(request, response)``."""
        check_handler(handler)
        self._not_found_handler = handler
        return self

    # -- Introspection --

    @property
    def routes(self) -> tuple[tuple[str, Route], ...]:
        """Registered ``(method, route)`` pairs in registration order."""
        return tuple(self._routes)

    @property
    def middleware(self) -> tuple[MiddlewareFunc, ...]:
        return self._middleware

    @property
    def compiled(self) -> CompiledRouteTable:
        """The snapshot requests are currently dispatched against."""
        return self._compiled

    @property
    def instance(self) -> Listener | None:
        """The bound listener, or ``None`` while not listening."""
        return self._listener

    # -- Server --

    async def listen(self, port: int) -> None:
        """Bind *port* on ``config.host`` and serve until ``close()``.

        Returns once the socket accepts connections. Raises
        ``InvalidArgument`` for a bad port and ``TransportFailure`` if
        binding fails.
        """
        port = _check_port(port)
        listener = Listener.create(self, port, self.config)
        await listener.start()
        self._listener = listener

    async def close(self) -> None:
        """Stop serving and release the socket.

        Raises ``TransportFailure`` if not listening or if releasing fails.
        """
        if self._listener is None:
            msg = "Cannot close: app is not listening."
            raise TransportFailure(msg)
        listener = self._listener
        try:
            await listener.stop()
        finally:
            self._listener = None

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point. Non-HTTP scopes are ignored."""
        await handle_request(
            scope,
            receive,
            send,
            table=self._compiled,
            not_found_handler=self._not_found_handler,
            error_handler=self._error_handler,
        )

    # -- Internal --

    def _get_error_handler(self) -> ErrorHandler:
        return self._error_handler

    def _recompile(self) -> None:
        self._compiled = compile_table(self._routes, self._middleware, self._get_error_handler)

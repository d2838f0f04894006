"""Route table and its middleware-compiled snapshot.

``RouteTable`` is the raw, append-only registration record.
``CompiledRouteTable`` is what the dispatcher reads: the same routes,
in the same order, with every handler wrapped in the global middleware
chain. A new snapshot is built on every mutation and swapped in whole.
"""

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType

from swoop._internal.types import ErrorHandler, MiddlewareFunc
from swoop.http.request import Request
from swoop.middleware.chain import merge_handler
from swoop.routing.route import Route

HTTP_METHODS: tuple[str, ...] = (
    "CONNECT",
    "DELETE",
    "GET",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
    "TRACE",
)


class RouteTable:
    """Ordered routes grouped by HTTP method.

    Insertion order is lookup order; routes are never removed.

    Usage::

        table = RouteTable()
        table.add("GET", Route(ExactMatcher("/"), index))
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, list[Route]] = {}

    def add(self, method: str, route: Route) -> None:
        self._routes.setdefault(method, []).append(route)

    def routes(self, method: str) -> tuple[Route, ...]:
        return tuple(self._routes.get(method, ()))

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(self._routes)

    def __iter__(self) -> Iterator[tuple[str, Route]]:
        for method, routes in self._routes.items():
            for route in routes:
                yield method, route

    def __len__(self) -> int:
        return sum(len(routes) for routes in self._routes.values())


class CompiledRouteTable:
    """Read-only, ready-to-dispatch snapshot of a ``RouteTable``."""

    __slots__ = ("_buckets",)

    def __init__(self, buckets: Mapping[str, tuple[Route, ...]] | None = None) -> None:
        self._buckets: Mapping[str, tuple[Route, ...]] = MappingProxyType(dict(buckets or {}))

    def find(self, request: Request) -> Route | None:
        """Return the first route in the request's method bucket that matches.

        Matchers after the first hit are never evaluated.
        """
        for route in self._buckets.get(request.method, ()):
            if route.matcher(request):
                return route
        return None

    def routes(self, method: str) -> tuple[Route, ...]:
        return self._buckets.get(method, ())

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(self._buckets)


def compile_table(
    table: RouteTable,
    middleware: tuple[MiddlewareFunc, ...],
    get_error_handler: Callable[[], ErrorHandler],
) -> CompiledRouteTable:
    """Wrap every route's handler with the complete global middleware list.

    Always a full recompute from the raw table, so earlier global
    wrappings are never applied twice.
    """
    if not middleware:
        return CompiledRouteTable({method: table.routes(method) for method in table.methods})

    buckets: dict[str, tuple[Route, ...]] = {}
    for method in table.methods:
        buckets[method] = tuple(
            Route(
                matcher=route.matcher,
                handler=merge_handler(route.handler, middleware, get_error_handler),
            )
            for route in table.routes(method)
        )
    return CompiledRouteTable(buckets)

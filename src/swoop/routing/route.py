"""Route and RouteOptions frozen dataclasses."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from swoop._internal.types import MiddlewareFunc, RequestHandler
from swoop.errors import InvalidArgument
from swoop.routing.matcher import PathMatcher


@dataclass(frozen=True, slots=True)
class Route:
    """One registered endpoint.

    Created at registration, never mutated or removed. ``handler`` already
    includes any route-scoped middleware.
    """

    matcher: PathMatcher
    handler: RequestHandler


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Per-route options.

    Usage::

        app.get("/admin", RouteOptions(use=(require_login,)), admin)
    """

    use: tuple[MiddlewareFunc, ...] = ()


OptionsOrMiddleware: TypeAlias = RouteOptions | MiddlewareFunc | Sequence[MiddlewareFunc]


def check_middleware(middleware: Sequence[Any], *, what: str = "middleware") -> None:
    """Raise ``InvalidArgument`` naming the first non-callable entry."""
    for position, mw in enumerate(middleware):
        if not callable(mw):
            msg = f"{what} at position {position} must be callable, not {type(mw).__name__}"
            raise InvalidArgument(msg)


def normalize_options(value: OptionsOrMiddleware | None) -> RouteOptions:
    """Resolve the three accepted option shapes into ``RouteOptions``.

    - ``None``                     -> no route-scoped middleware
    - a single middleware callable -> ``RouteOptions(use=(mw,))``
    - a list/tuple of middleware   -> ``RouteOptions(use=tuple(mws))``
    - ``RouteOptions``             -> itself, after validation
    """
    if value is None:
        options = RouteOptions()
    elif isinstance(value, RouteOptions):
        options = value
    elif callable(value):
        options = RouteOptions(use=(value,))
    elif isinstance(value, (list, tuple)):
        options = RouteOptions(use=tuple(value))
    else:
        msg = (
            "options must be RouteOptions, a middleware callable or a list of them, "
            f"not {type(value).__name__}"
        )
        raise InvalidArgument(msg)

    if options.use is None:
        options = RouteOptions()
    elif not isinstance(options.use, tuple):
        options = RouteOptions(use=tuple(options.use))
    check_middleware(options.use)
    return options


def check_handler(handler: Callable[..., Any] | None, *, what: str = "handler") -> None:
    if not callable(handler):
        msg = f"{what} must be callable, not {type(handler).__name__}"
        raise InvalidArgument(msg)

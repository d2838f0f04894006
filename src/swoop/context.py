"""Request-scoped context.

The dispatcher opens a scope around every request with ``request_scope``.
Inside it, ``get_request()`` returns the request being dispatched and
``g`` is a fresh namespace that middleware can use to hand data to later
stages. Each task sees only its own request.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from swoop.http.request import Request

request_var: ContextVar[Request] = ContextVar("swoop_request")
_globals_var: ContextVar[dict[str, Any]] = ContextVar("swoop_g")


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` outside a request.
    """
    return request_var.get()


@contextmanager
def request_scope(request: Request) -> Iterator[None]:
    """Bind *request* and an empty ``g`` namespace for the enclosed block."""
    request_token = request_var.set(request)
    globals_token = _globals_var.set({})
    try:
        yield
    finally:
        _globals_var.reset(globals_token)
        request_var.reset(request_token)


def _namespace() -> dict[str, Any]:
    try:
        return _globals_var.get()
    except LookupError:
        msg = "'g' is only available while a request is being dispatched"
        raise RuntimeError(msg) from None


class _RequestGlobals:
    """Attribute access onto the current request's namespace.

    Usage::

        from swoop.context import g

        async def load_user(request, response, next):
            g.user = await users.lookup(request.headers.get("authorization"))
            await next()

        async def profile(request, response):
            await response.end(g.user.name)
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        try:
            return _namespace()[name]
        except KeyError:
            msg = f"'g' has no attribute {name!r} in the current request scope"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        _namespace()[name] = value

    def __delattr__(self, name: str) -> None:
        if _namespace().pop(name, _MISSING) is _MISSING:
            msg = f"'g' has no attribute {name!r} in the current request scope"
            raise AttributeError(msg)

    def __contains__(self, name: str) -> bool:
        return name in _namespace()

    def get(self, name: str, default: Any = None) -> Any:
        return _namespace().get(name, default)

    def __repr__(self) -> str:
        try:
            return f"<g {_namespace()!r}>"
        except RuntimeError:
            return "<g (no request)>"


_MISSING = object()

g = _RequestGlobals()
"""Per-request namespace."""

"""Swoop exception hierarchy.

Shared across the route table, chain composition, dispatcher, and
listener so every module raises and catches the same types.
"""

from dataclasses import dataclass


class SwoopError(Exception):
    """Base for all swoop-specific errors."""


class InvalidArgument(SwoopError, TypeError):
    """Raised for a malformed registration or listen call.

    Always raised before any state is mutated, so the caller can
    recover by fixing the call.
    """


class TransportFailure(SwoopError):
    """Binding or releasing the listening socket failed.

    The underlying ``OSError`` is available as ``__cause__``.
    """


class ErrorHandlerFailure(SwoopError):
    """The configured error handler raised while handling a failure.

    Not caught by the dispatcher. The original handler exception is
    available as ``__cause__``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwoopError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The default error handler answers
    with ``status`` instead of 500.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing can answer the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

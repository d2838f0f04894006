"""Streaming HTTP response writer.

Handlers, middleware, and error handlers share one ``Response`` per
request and write to it imperatively::

    async def hello(request, response):
        response.set_header("Content-Type", "text/plain")
        await response.end("hello")

The writer translates calls into ASGI ``http.response.start`` and
``http.response.body`` messages. ``write_head()`` only records the
status line, so ``end(data)`` on an unstarted response can still send
an exact ``Content-Length``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from swoop._internal.asgi import Send


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class Response:
    """Mutable response context bound to one ASGI ``send`` callable.

    Lifecycle: headers pending -> headers sent -> body streaming -> finished.
    ``headers_sent`` flips as soon as ``write_head()`` is called (or the
    first body write implies a 200), after which headers are frozen.
    """

    __slots__ = (
        "_error_reported",
        "_finished",
        "_head_flushed",
        "_headers",
        "_headers_sent",
        "_send",
        "_status",
    )

    def __init__(self, send: Send) -> None:
        self._send = send
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._headers_sent = False
        self._head_flushed = False
        self._finished = False
        # Set once the error handler has run for this request
        self._error_reported = False

    # -- State --

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    @property
    def headers_sent(self) -> bool:
        """True once the status line has been committed."""
        return self._headers_sent

    @property
    def finished(self) -> bool:
        """True once ``end()`` has completed."""
        return self._finished

    # -- Head --

    def set_header(self, name: str, value: str) -> Response:
        """Add a response header. Chainable.

        Raises ``RuntimeError`` if headers were already sent.
        """
        if self._headers_sent:
            msg = f"Cannot set header {name!r}: headers already sent."
            raise RuntimeError(msg)
        self._headers.append((name, value))
        return self

    async def write_head(
        self,
        status: int,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        """Commit the status code and any extra headers."""
        if self._headers_sent:
            msg = "Cannot write head: headers already sent."
            raise RuntimeError(msg)
        if headers:
            pairs = headers.items() if isinstance(headers, Mapping) else headers
            self._headers.extend(pairs)
        self._status = status
        self._headers_sent = True

    # -- Body --

    async def write(self, data: str | bytes) -> None:
        """Stream a chunk of the body, committing a 200 head if needed."""
        if self._finished:
            msg = "Cannot write: response already ended."
            raise RuntimeError(msg)
        if not self._headers_sent:
            await self.write_head(self._status)
        await self._flush_head(content_length=None)
        chunk = _encode(data)
        if chunk and _body_allowed(self._status):
            await self._send({"type": "http.response.body", "body": chunk, "more_body": True})

    async def end(self, data: str | bytes | None = None) -> None:
        """Finish the response, optionally with a final chunk."""
        if self._finished:
            msg = "Cannot end: response already ended."
            raise RuntimeError(msg)
        chunk = _encode(data) if data is not None else b""
        if not _body_allowed(self._status):
            chunk = b""
        if not self._headers_sent:
            await self.write_head(self._status)
        if not self._head_flushed:
            # Nothing streamed yet: the whole body is known.
            await self._flush_head(content_length=len(chunk))
        await self._send({"type": "http.response.body", "body": chunk, "more_body": False})
        self._finished = True

    async def _flush_head(self, *, content_length: int | None) -> None:
        if self._head_flushed:
            return
        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]
        has_length = any(name == b"content-length" for name, _ in raw_headers)
        if content_length is not None and not has_length:
            raw_headers.append((b"content-length", str(content_length).encode("latin-1")))
        self._head_flushed = True
        await self._send(
            {
                "type": "http.response.start",
                "status": self._status,
                "headers": raw_headers,
            }
        )

    def __repr__(self) -> str:
        return (
            f"<Response status={self._status} headers_sent={self._headers_sent}"
            f" finished={self._finished}>"
        )

"""Static file handlers.

``App.static(base_path, root_dir, cache)`` registers one GET route whose
matcher accepts every path starting with ``base_path``. Two serving modes:

- **cached** (default): ``root_dir`` is walked once at registration and
  every regular file is held in memory under ``base_path + "/" + relpath``.
  Later changes on disk are not picked up; the snapshot is intentional.
- **streaming**: each request resolves its path below ``root_dir`` and
  streams the file in chunks with anyio's async file API.

Either mode answers 404 itself when nothing matches; the app's not-found
handler is not involved.
"""

from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
import anyio.to_thread

from swoop._internal.types import PathPredicate, RequestHandler
from swoop.errors import InvalidArgument
from swoop.http.request import Request
from swoop.http.response import Response

if TYPE_CHECKING:
    from swoop.app import App

logger = logging.getLogger("swoop.static")

DEFAULT_CHUNK_SIZE = 64 * 1024


def add_static(
    app: App,
    base_path: str,
    root_dir: str | os.PathLike[str],
    cache: bool = True,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> App:
    """Build a static handler for *root_dir* and register it on *app*.

    Relative *root_dir* values are resolved against the working directory.
    Raises ``InvalidArgument`` before registering anything if the
    arguments are malformed or, in cached mode, *root_dir* is not a
    directory.
    """
    if not isinstance(base_path, str):
        msg = f"base_path must be a string, not {type(base_path).__name__}"
        raise InvalidArgument(msg)
    if not isinstance(root_dir, (str, os.PathLike)):
        msg = f"root_dir must be a string or path, not {type(root_dir).__name__}"
        raise InvalidArgument(msg)

    root = Path(root_dir).resolve()

    handler: RequestHandler
    if cache:
        if not root.is_dir():
            msg = f"root_dir {str(root)!r} is not a directory"
            raise InvalidArgument(msg)
        handler = create_cached_handler(root, base_path)
    else:
        handler = create_streaming_handler(root, base_path, chunk_size=chunk_size)

    return app.get(prefix_matcher(base_path), handler)


def prefix_matcher(base_path: str) -> PathPredicate:
    def matches(request: Request) -> bool:
        return request.path.startswith(base_path)

    return matches


def content_type_for(path: str | Path) -> str:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or "application/octet-stream"


def load_files(root: Path, base_path: str) -> dict[str, tuple[str, bytes]]:
    """Read every regular file below *root*, keyed by request path.

    Values are ``(content_type, data)``.
    """
    separator = "" if base_path.endswith("/") else "/"
    files: dict[str, tuple[str, bytes]] = {}
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        key = base_path + separator + path.relative_to(root).as_posix()
        files[key] = (content_type_for(path), path.read_bytes())
    return files


async def _not_found(response: Response) -> None:
    await response.write_head(404)
    await response.end()


def create_cached_handler(root: Path, base_path: str) -> RequestHandler:
    files = load_files(root, base_path)
    logger.debug("Cached %d static files from %s under %s", len(files), root, base_path)

    async def serve_cached(request: Request, response: Response) -> None:
        entry = files.get(request.path)
        if entry is None:
            await _not_found(response)
            return
        content_type, data = entry
        await response.write_head(200, {"Content-Type": content_type})
        await response.end(data)

    return serve_cached


def _locate(root: Path, relative: str) -> Path | None:
    """Resolve *relative* below *root*; ``None`` unless it is a regular file inside it."""
    file_path = (root / relative).resolve() if relative else root
    if not file_path.is_relative_to(root):
        return None
    if not file_path.is_file():
        return None
    return file_path


def create_streaming_handler(
    root: Path,
    base_path: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> RequestHandler:
    async def serve_file(request: Request, response: Response) -> None:
        relative = request.path[len(base_path) :].lstrip("/")
        file_path = await anyio.to_thread.run_sync(_locate, root, relative)
        if file_path is None:
            await _not_found(response)
            return

        await response.write_head(200, {"Content-Type": content_type_for(file_path)})
        async with await anyio.open_file(file_path, "rb") as f:
            while chunk := await f.read(chunk_size):
                await response.write(chunk)
        await response.end()

    return serve_file

"""``swoop run`` — serve an app until interrupted."""

import argparse
import asyncio
import dataclasses
import logging
import sys

from swoop.app import App
from swoop.cli._resolve import resolve_app
from swoop.errors import SwoopError, TransportFailure

logger = logging.getLogger("swoop.cli")


async def serve(app: App, port: int) -> None:
    """Listen on *port* until the server stops, then release it."""
    await app.listen(port)
    listener = app.instance
    if listener is None:
        msg = "App stopped listening before it could be served"
        raise TransportFailure(msg)
    try:
        await listener.wait_closed()
    finally:
        await app.close()


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app``, configure logging, and serve it.

    CLI flags override the app's config.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.host:
        app.config = dataclasses.replace(app.config, host=args.host)
    port = args.port if args.port is not None else app.config.port
    level = (args.log_level or app.config.log_level).upper()

    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        asyncio.run(serve(app, port))
    except KeyboardInterrupt:
        pass
    except SwoopError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

"""A TLS server that accepts connections, logs them and closes them."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import itertools
import logging
import os
import ssl
import sys
from pathlib import Path

from connkit.accept import Acceptor, TlsError

logger = logging.getLogger(__name__)


def build_server_context(cert_path: str | os.PathLike, key_path: str | os.PathLike) -> ssl.SSLContext:
    """A server context loaded with the PEM certificate chain and private key."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(certfile=os.fspath(cert_path), keyfile=os.fspath(key_path))
    return context


async def serve(host: str, port: int, context: ssl.SSLContext) -> asyncio.Server:
    """Start listening; each completed handshake is logged and closed.

    Returns the started server; the caller closes it.
    """
    service = await Acceptor(context).new_service()
    count = itertools.count()

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            await service.ready()
            stream = await service.call(reader, writer)
        except TlsError as exc:
            logger.error("TLS error: %r", exc)
            return
        num = next(count)
        logger.info("[%d] Got TLS connection: %r", num, stream)
        stream.close()
        with contextlib.suppress(OSError):
            await stream.wait_closed()

    logger.info("starting server at: %r", (host, port))
    return await asyncio.start_server(handle, host, port)


async def _run(host: str, port: int, context: ssl.SSLContext) -> None:
    server = await serve(host, port, context)
    async with server:
        await server.serve_forever()


def main(argv: list[str] | None = None) -> int:
    """Run the TLS server until interrupted."""
    parser = argparse.ArgumentParser(
        prog="connkit-serve", description="Accept TLS connections and log them."
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8443)
    parser.add_argument("--cert", type=Path, default=Path("cert.pem"))
    parser.add_argument("--key", type=Path, default=Path("key.pem"))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        context = build_server_context(args.cert, args.key)
    except OSError as exc:
        print(f"error: cannot load certificate or key: {exc}", file=sys.stderr)
        return 1

    try:
        asyncio.run(_run(args.host, args.port, context))
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
# connkit

Small asyncio building blocks for writing network clients and servers.

## What is inside

- **Connectors** (`connkit.connector`, `connkit.tcp`): `Connector().service()`
  gives a `ConnectorService` whose `call` takes a `ConnectInfo` (or a plain
  request such as `"example.com:443"`), resolves the name if it has to, and opens
  a TCP connection with `asyncio.open_connection`. When several addresses are
  known they are tried in order until one connects. The result is a `Connection`
  holding the request and the `(reader, writer)` pair.
- **TLS connector** (`connkit.tls_connect`): `TlsConnector` (or
  `TlsConnector.service(context)`) upgrades the stream of an established
  `Connection` with a client TLS handshake. A hostname that is not a valid server
  name raises `ValueError`. `default_client_context()` returns a context that
  verifies against the system roots.
- **Resolvers** (`connkit.resolver`): `Resolver` uses the event loop's
  `getaddrinfo` by default. Plug in your own lookup by subclassing `Resolve` and
  implementing `async lookup(host, port)`, then pass it to
  `Resolver.custom(...)`.
- **Connection info** (`connkit.info`, `connkit.host`): `ConnectInfo` carries the
  request, a fallback port, resolved addresses and an optional local address;
  its setters return the same object so calls chain. `UriHost` takes hostname and
  port from a URI, and `scheme_to_port` maps well-known schemes to ports (for
  example `http` to 80, `https` to 443, `postgres` to 5432).
- **Acceptors** (`connkit.accept`): `Acceptor` wraps an `ssl.SSLContext`;
  `await acceptor.new_service()` gives an `AcceptorService` that performs
  server-side TLS handshakes with a timeout (3 seconds by default, changeable
  with `set_handshake_timeout`). Concurrent handshakes are capped per thread,
  256 by default, adjustable with `max_concurrent_tls_connect`; `ready()` waits
  for room. A slow handshake raises `TlsTimeout` and a failed one
  `TlsHandshakeError`, both subclasses of `TlsError` (as is `ServiceError`, for
  wrapping failures of your own service). A successful handshake returns a
  `TlsStream`.
- **Errors** (`connkit.errors`): connector failures are subclasses of
  `ConnectError`: `ResolverError`, `NoRecords`, `InvalidInput`, `Unresolved`
  and `ConnectIoError`.
- **Utilities**: an unbounded single-consumer `channel()`; a `Counter` that
  hands out `CounterGuard`s (usable as context managers) and wakes a waiter when
  capacity frees up; `LocalWaker`; the small awaitables `ready`, `ok`, `err`,
  `Either` and `poll_fn` in `connkit.futures`; and `ByteString`, an immutable
  UTF-8 string backed by bytes whose `strip` results can be turned back into
  slices with `slice_ref`.

## Installing

```sh
pip install .
```

Python 3.11 or later is required. The package has no third-party
dependencies.

## Connecting

```python
import asyncio

from connkit.connector import Connector
from connkit.info import ConnectInfo


async def run():
    service = Connector().service()
    conn = await service.call(ConnectInfo("localhost:8080"))
    print("connected to", conn.hostname())
    reader, writer = conn.io
    writer.close()


asyncio.run(run())
```

The port comes from the request (`"host:port"`); `ConnectInfo.set_port`
supplies one when the request has none. A request that already carries
addresses (`ConnectInfo.with_addr`) skips DNS entirely, and a hostname that is an
IP literal is used as is.

## Channels

```python
import asyncio

from connkit.channel import channel


async def run():
    tx, rx = channel()
    tx.send("hello")
    print(await rx.recv())


asyncio.run(run())
```

Once every sender has been released (`Sender.release()` or leaving a `with`
block), `recv` drains what is still buffered and then returns `None`; the
receiver is also an async iterator that stops at that point. `Sender.close()` or
`Receiver.close()` makes further sends fail: sending then raises `SendError`,
which hands the item back through `into_inner()`. `try_recv` returns a message
without waiting and raises `ChannelEmpty` when one may still arrive.

## A test TLS server

```sh
connkit-serve --cert cert.pem --key key.pem
```

This loads a PEM certificate chain and private key (by default `cert.pem` and
`key.pem` in the current directory), listens on `127.0.0.1:8443` (change with
`--host` and `--port`), completes TLS handshakes, logs each accepted connection
with a running count, and closes it. Connect with
`curl -k https://127.0.0.1:8443` to see a handshake succeed; a plain-text request
produces a TLS error in the log instead. `build_server_context` and `serve` in
`connkit.serve` do the same from code.

## What it does not do

The server above only completes handshakes and closes connections; there is no
request handling, worker pool or service-composition framework. The package does
not generate certificates, and TLS is provided only through Python's `ssl`
module.

## Running the tests

```sh
pip install ".[test]"
pytest
```
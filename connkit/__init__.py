"""Asyncio TCP and TLS connectors, TLS acceptors and small concurrency utilities."""

__version__ = "0.1.0"
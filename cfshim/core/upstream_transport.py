"""Per-host HTTPX transports, so tests can serve Workers AI in-process.

``WorkersAIBackend`` asks :func:`get_upstream_transport` for every call; a
host with no registered transport goes over the network as usual.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("cfshim")


class TransportRegistry:
    """Host (netloc) to transport map, keyed case-insensitively."""

    def __init__(self) -> None:
        self._by_host: dict[str, httpx.AsyncBaseTransport] = {}

    @staticmethod
    def _key(host: str) -> str:
        return host.strip().lower()

    def register(self, host: str, transport: httpx.AsyncBaseTransport) -> None:
        if not host or not host.strip():
            raise ValueError("host is required")
        self._by_host[self._key(host)] = transport
        logger.debug("Backend calls to '%s' now use %s", self._key(host), type(transport).__name__)

    def unregister(self, host: str) -> None:
        self._by_host.pop(self._key(host), None)

    def clear(self) -> None:
        self._by_host.clear()

    def for_url(self, url: str) -> Optional[httpx.AsyncBaseTransport]:
        host = urlparse(url).netloc if url else ""
        return self._by_host.get(self._key(host)) if host else None


_registry = TransportRegistry()


def register_upstream_transport(host: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route every backend call for ``host`` (a netloc) through ``transport``."""
    _registry.register(host, transport)


def register_upstream_transport_for_url(
    url: str, transport: httpx.AsyncBaseTransport
) -> None:
    _registry.register(urlparse(url).netloc, transport)


def clear_upstream_transports() -> None:
    _registry.clear()


def get_upstream_transport(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Transport registered for the URL's netloc, or ``None``."""
    return _registry.for_url(url)


@contextmanager
def upstream_transport(host: str, transport: httpx.AsyncBaseTransport) -> Iterator[None]:
    """Register ``transport`` for ``host`` for the duration of a block."""
    _registry.register(host, transport)
    try:
        yield
    finally:
        _registry.unregister(host)

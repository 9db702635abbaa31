"""High-level DevTools session that wraps the RPC client.

``DevToolsSession`` is the entry-point consumed by the MCP server: it
keeps one :class:`~devtools_core.cdp_client.DevToolsClient` in memory and
exposes it to asyncio code.  The client itself has no locking and blocks
on its socket, so every operation takes the session lock and runs in a
worker thread.  Disconnecting is the exception: closing the transport
without the lock wakes a receive that is blocked while holding it.

All public methods return **plain-text strings** ready to hand to an LLM.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from devtools_core.cdp_client import DevToolsClient
from devtools_core.errors import ClientError
from devtools_core.formatters import format_events, format_result
from devtools_core.proto import DevTools
from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

T = TypeVar("T")

Connector = Callable[[str, int], DevToolsClient]


def _connect(host: str, port: int) -> DevToolsClient:
    # Raw envelopes: callers may enable domains the bundled bindings lack.
    return DevToolsClient.connect(port, host)


# ---------------------------------------------------------------------------
# DevToolsSession
# ---------------------------------------------------------------------------


class DevToolsSession:
    """Serializes access to a single DevTools connection.

    Usage::

        session = DevToolsSession()
        print(await session.connect("localhost", 9222))
        print(await session.call("Page.navigate", {"url": "https://example.com"}))
        print(await session.poll(5))
        print(await session.events())
        print(await session.disconnect())

    *connector* builds the client for :meth:`connect`; tests pass one that
    returns a client over an in-memory transport.
    """

    def __init__(self, connector: Connector = _connect) -> None:
        self._connector = connector
        self._client: DevToolsClient | None = None
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self._client is not None

    @property
    def devtools(self) -> DevTools | None:
        """Typed bindings over the current client, if connected."""
        if self._client is None:
            return None
        return DevTools(self._client)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def connect(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> str:
        """Discover the first target on *host*:*port* and connect to it."""
        if self._client is not None:
            return "Error: already connected. Call disconnect() first."

        try:
            client = await self._run(self._connector, host, port)
        except ClientError as exc:
            return f"Error connecting to {host}:{port}: {exc}"

        self._client = client
        logger.info("Session connected to %s:%d", host, port)
        return f"Connected to DevTools at {host}:{port}."

    async def disconnect(self) -> str:
        """Close the connection.  Buffered events are discarded."""
        client = self._client
        if client is None:
            return "Error: no active DevTools session."

        # A blocked poll or call holds the lock; closing makes its receive fail.
        self._client = None
        await asyncio.to_thread(client.close)
        return "DevTools session ended."

    # ------------------------------------------------------------------
    # Calls and events
    # ------------------------------------------------------------------

    async def call(self, method: str, params: Mapping[str, Any] | None = None) -> str:
        """Invoke *method* with raw JSON *params* and format its result."""
        client = self._client
        if client is None:
            return "Error: no active DevTools session."

        try:
            result = await self._run(client.invoke, method, params)
        except ClientError as exc:
            return f"Error calling {method}: {exc}"
        return format_result(method, result)

    async def poll(self, count: int = 1) -> str:
        """Receive *count* messages, then report the buffered events.

        Each receive blocks until a message arrives.
        """
        client = self._client
        if client is None:
            return "Error: no active DevTools session."
        if count < 1:
            return "Error: count must be at least 1."

        def receive() -> None:
            for _ in range(count):
                client.poll()

        try:
            await self._run(receive)
        except ClientError as exc:
            return f"Error polling: {exc}"
        return await self.events()

    async def events(self) -> str:
        """Drain and format every buffered event without receiving."""
        client = self._client
        if client is None:
            return "Error: no active DevTools session."

        drained = await self._run(client.drain_events)
        return format_events(drained)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        """Run *func* in a worker thread while holding the session lock."""

        def locked() -> T:
            with self._lock:
                return func(*args)

        return await asyncio.to_thread(locked)

"""
Chrome DevTools Protocol (CDP) RPC client.

Connects to a browser started with ``--remote-debugging-port`` and speaks
CDP over a single WebSocket.  The client is synchronous: every call blocks
on the connection until its own response arrives, buffering any events and
other responses it reads on the way.

Typed bindings generated by :mod:`devtools_core.codegen` delegate to
:meth:`DevToolsClient.invoke`.
"""

from __future__ import annotations

import enum
import json
import logging
from collections import deque
from collections.abc import Mapping
from typing import Any, TypeVar, overload

from pydantic import BaseModel, ValidationError
from websockets.exceptions import WebSocketException
from websockets.sync.client import ClientConnection
from websockets.sync.client import connect as ws_connect

from devtools_core.discovery import discover_websocket_url
from devtools_core.errors import CallError, DecodeError, TransportError
from devtools_core.models import EventRegistry, ProtocolEvent, RequestModel
from devtools_core.protocol import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_MESSAGE_SIZE,
    TIMEOUT_OPEN,
    JsonObject,
    Transport,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

# ---------------------------------------------------------------------------
# Wire envelopes
# ---------------------------------------------------------------------------


class ErrorInfo(BaseModel):
    code: float
    message: str
    data: Any = None


class ResponseEnvelope(BaseModel):
    """A reply to one request, matched to it by ``id``."""

    id: int
    result: Any = None
    error: ErrorInfo | None = None


class EventEnvelope(BaseModel):
    """An unsolicited server message; carries no ``id``."""

    method: str
    params: JsonObject | None = None


# ---------------------------------------------------------------------------
# WebSocket transport
# ---------------------------------------------------------------------------


class WebSocketTransport:
    """:class:`~devtools_core.protocol.Transport` over a ``websockets`` sync connection."""

    def __init__(self, connection: ClientConnection) -> None:
        self._ws = connection

    @classmethod
    def open(cls, url: str) -> WebSocketTransport:
        logger.info("Connecting to DevTools at %s", url)
        try:
            connection = ws_connect(
                url,
                max_size=MAX_MESSAGE_SIZE,
                open_timeout=TIMEOUT_OPEN,
            )
        except (WebSocketException, OSError, TimeoutError) as exc:
            raise TransportError(f"Failed to open WebSocket {url}: {exc}") from exc
        return cls(connection)

    def send(self, message: str) -> None:
        try:
            self._ws.send(message)
        except (WebSocketException, OSError) as exc:
            raise TransportError(f"WebSocket send failed: {exc}") from exc

    def recv(self) -> str | bytes:
        try:
            return self._ws.recv()
        except (WebSocketException, OSError) as exc:
            raise TransportError(f"WebSocket receive failed: {exc}") from exc

    def close(self) -> None:
        self._ws.close()


# ---------------------------------------------------------------------------
# DevTools client
# ---------------------------------------------------------------------------


class ConnectionState(enum.Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class DevToolsClient:
    """Synchronous CDP client over one connection.

    Lifecycle::

        client = DevToolsClient.connect(9222)
        client.invoke("Page.enable")
        client.invoke("Page.navigate", {"url": "https://example.com"})
        client.poll()
        for event in client.drain_events():
            ...

    Request ids start at 1 and are private to the instance.  There is no
    internal locking: concurrent callers must serialize access to the
    whole client (see :class:`~devtools_core.session.DevToolsSession`).
    """

    def __init__(
        self,
        transport: Transport | None = None,
        events: EventRegistry | None = None,
    ) -> None:
        self._transport = transport
        self._events = events
        self._msg_id: int = 1
        self._state = (
            ConnectionState.OPEN if transport is not None else ConnectionState.CONNECTING
        )

        # Responses read while waiting for a different id, in arrival order.
        self._pending_responses: list[ResponseEnvelope] = []

        # Events awaiting the caller, in arrival order.
        self.pending_events: deque[ProtocolEvent | EventEnvelope] = deque()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def connect(
        cls,
        port: int = DEFAULT_PORT,
        host: str = DEFAULT_HOST,
        events: EventRegistry | None = None,
    ) -> DevToolsClient:
        """Discover the first debuggable target on *host*:*port* and connect."""
        client = cls(events=events)
        client.open(port, host)
        return client

    def open(self, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST) -> None:
        """Run discovery and attach the WebSocket transport."""
        if self._state is not ConnectionState.CONNECTING:
            raise TransportError(f"Cannot open a client that is {self._state.value}")
        try:
            url = discover_websocket_url(host, port)
            self._transport = WebSocketTransport.open(url)
        except Exception:
            self._state = ConnectionState.CLOSED
            raise
        self._state = ConnectionState.OPEN

    def close(self) -> None:
        """Close the transport.  The client cannot be reused."""
        self._state = ConnectionState.CLOSED
        if self._transport is not None:
            self._transport.close()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def pending_responses(self) -> tuple[ResponseEnvelope, ...]:
        """Responses received but not yet claimed by their caller."""
        return tuple(self._pending_responses)

    def drain_events(self) -> list[ProtocolEvent | EventEnvelope]:
        """Remove and return every buffered event, oldest first."""
        drained = list(self.pending_events)
        self.pending_events.clear()
        return drained

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    @overload
    def invoke(
        self,
        method: str,
        params: RequestModel | Mapping[str, Any] | None,
        result_type: type[R],
    ) -> R: ...

    @overload
    def invoke(
        self,
        method: str,
        params: RequestModel | Mapping[str, Any] | None = None,
        result_type: None = None,
    ) -> Any: ...

    def invoke(
        self,
        method: str,
        params: RequestModel | Mapping[str, Any] | None = None,
        result_type: type[R] | None = None,
    ) -> Any:
        """Send *method* and block until the response with its id arrives.

        The ``result`` object is validated into *result_type*, or returned
        as plain JSON when no type is given.  An ``error`` reply raises
        :class:`CallError`.
        """
        msg_id = self._msg_id
        self._msg_id += 1

        if params is None:
            wire_params: JsonObject = {}
        elif isinstance(params, RequestModel):
            wire_params = params.to_wire()
        else:
            wire_params = dict(params)

        msg = {"id": msg_id, "method": method, "params": wire_params}
        self._send(json.dumps(msg))
        logger.debug("-> CDP %s (id=%d)", method, msg_id)

        response = self._take_response(msg_id)
        while response is None:
            self.poll()
            response = self._take_response(msg_id)

        if response.result is not None:
            if result_type is None:
                return response.result
            try:
                return result_type.model_validate(response.result)
            except ValidationError as exc:
                raise DecodeError(f"Malformed {method} result: {exc}") from exc

        if response.error is not None:
            error = response.error
            raise CallError(method, error.code, error.message, error.data)
        raise CallError(method)

    def poll(self) -> None:
        """Receive exactly one message and buffer it as a response or event."""
        raw = self._recv()
        if isinstance(raw, bytes):
            raise DecodeError("Unexpected binary WebSocket frame")

        try:
            msg = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Invalid JSON from DevTools: {exc}") from exc
        if not isinstance(msg, dict):
            raise DecodeError(f"Expected a JSON object, got {type(msg).__name__}")

        if "id" in msg:
            try:
                response = ResponseEnvelope.model_validate(msg)
            except ValidationError as exc:
                raise DecodeError(f"Malformed response: {exc}") from exc
            logger.debug("<- CDP response id=%d", response.id)
            self._pending_responses.append(response)
            return

        if self._events is not None:
            event: ProtocolEvent | EventEnvelope = self._events.decode(msg)
        else:
            try:
                event = EventEnvelope.model_validate(msg)
            except ValidationError as exc:
                raise DecodeError(f"Malformed event: {exc}") from exc
        logger.debug("<- CDP event %s", msg.get("method"))
        self.pending_events.append(event)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _take_response(self, msg_id: int) -> ResponseEnvelope | None:
        """Remove and return the first buffered response bearing *msg_id*."""
        for index, response in enumerate(self._pending_responses):
            if response.id == msg_id:
                del self._pending_responses[index]
                return response
        return None

    def _require_transport(self) -> Transport:
        if self._state is not ConnectionState.OPEN or self._transport is None:
            raise TransportError(f"Connection is {self._state.value}")
        return self._transport

    def _send(self, raw: str) -> None:
        transport = self._require_transport()
        try:
            transport.send(raw)
        except TransportError:
            self._state = ConnectionState.CLOSED
            raise

    def _recv(self) -> str | bytes:
        transport = self._require_transport()
        try:
            return transport.recv()
        except TransportError:
            self._state = ConnectionState.CLOSED
            raise

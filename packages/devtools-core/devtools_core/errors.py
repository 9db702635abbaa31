"""Exception hierarchy for schema loading, code generation and RPC calls."""

from __future__ import annotations

from typing import Any


class ClientError(RuntimeError):
    """Base class for failures raised by :class:`DevToolsClient`."""


class TransportError(ClientError):
    """The connection failed to open, read or write."""


class DiscoveryError(ClientError):
    """The ``/json`` endpoint did not yield a usable WebSocket URL."""


class DecodeError(ClientError):
    """A message was not valid JSON or did not match its expected type."""


class CallError(ClientError):
    """The server answered a request with an error object.

    ``code``, ``message`` and ``data`` mirror the wire ``error`` object.
    They are all ``None`` when the response carried neither ``result`` nor
    ``error``.
    """

    def __init__(
        self,
        method: str,
        code: float | None = None,
        message: str | None = None,
        data: Any = None,
    ) -> None:
        self.method = method
        self.code = code
        self.message = message
        self.data = data
        detail = message if message is not None else "response carried no result"
        if code is not None:
            detail = f"{detail} (code {code:g})"
        super().__init__(f"{method}: {detail}")


class SchemaError(ValueError):
    """The protocol schema document is malformed."""


class GenerationError(RuntimeError):
    """Bindings cannot be generated from an otherwise valid schema."""

"""Shared pytest fixtures and test helpers for devtools tests."""

from __future__ import annotations

import importlib.util
import json
import sys
from collections import deque
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

from devtools_core.cdp_client import DevToolsClient
from devtools_core.errors import TransportError
from devtools_core.schema import SchemaDocument, parse_schema


# ---------------------------------------------------------------------------
# Scripted transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """In-memory :class:`~devtools_core.protocol.Transport`.

    Incoming messages are queued up front with :meth:`push`; ``recv`` pops
    them in order and raises ``TransportError`` once the script runs out.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.incoming: deque[str | bytes | Exception] = deque()
        self.closed = False
        self.fail_send = False

    def push(self, *messages: Any) -> None:
        for message in messages:
            if isinstance(message, (str, bytes, Exception)):
                self.incoming.append(message)
            else:
                self.incoming.append(json.dumps(message))

    def send(self, message: str) -> None:
        if self.fail_send:
            raise TransportError("send failed")
        self.sent.append(message)

    def recv(self) -> str | bytes:
        if not self.incoming:
            raise TransportError("connection closed by peer")
        item = self.incoming.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    @property
    def sent_json(self) -> list[dict[str, Any]]:
        return [json.loads(raw) for raw in self.sent]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> DevToolsClient:
    """Untyped client: events are buffered as raw envelopes."""
    return DevToolsClient(transport)


# ---------------------------------------------------------------------------
# Schemas and generated modules
# ---------------------------------------------------------------------------


def make_schema(*domains: dict[str, Any]) -> SchemaDocument:
    """Build a validated document from raw domain dicts."""
    return parse_schema({"domains": list(domains)})


FOO_DOMAIN: dict[str, Any] = {
    "domain": "Foo",
    "types": [
        {
            "id": "Color",
            "type": "string",
            "enum": ["red", "green"],
        },
        {
            "id": "Item",
            "type": "object",
            "properties": [
                {"name": "itemId", "type": "integer"},
                {"name": "color", "$ref": "Color", "optional": True},
                {"name": "children", "type": "array", "optional": True, "items": {"$ref": "Item"}},
                {"name": "parent", "$ref": "Item", "optional": True},
            ],
        },
    ],
    "commands": [
        {
            "name": "bar",
            "parameters": [{"name": "x", "type": "integer", "optional": True}],
        },
        {
            "name": "getItem",
            "parameters": [{"name": "itemId", "type": "integer"}],
            "returns": [{"name": "item", "$ref": "Item"}],
        },
    ],
    "events": [
        {"name": "ping"},
        {
            "name": "painted",
            "parameters": [{"name": "color", "$ref": "Color"}],
        },
    ],
}


@pytest.fixture
def foo_schema() -> SchemaDocument:
    return make_schema(FOO_DOMAIN)


@pytest.fixture
def load_generated(tmp_path: Path) -> Iterator[Callable[[str, str], ModuleType]]:
    """Import generated source from ``tmp_path`` under a unique module name."""
    loaded: list[str] = []

    def load(source: str, name: str = "generated_bindings") -> ModuleType:
        path = tmp_path / f"{name}.py"
        path.write_text(source, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(name, path)
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        # Registered first: model_rebuild resolves names via sys.modules.
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    try:
        yield load
    finally:
        for name in loaded:
            sys.modules.pop(name, None)

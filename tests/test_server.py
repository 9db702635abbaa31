"""Tests for the MCP tool registry and strategies."""

from __future__ import annotations

import asyncio

import pytest

from devtools_core.cdp_client import DevToolsClient
from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT
from devtools_core.session import DevToolsSession
from devtools_mcp import server


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def connected_session(transport) -> DevToolsSession:
    session = DevToolsSession(connector=lambda host, port: DevToolsClient(transport))
    run(session.connect())
    return session


class TestRegistry:
    def test_tool_names(self):
        tools = run(server.handle_list_tools())
        assert [t.name for t in tools] == [
            "devtools_connect",
            "devtools_call",
            "devtools_poll",
            "devtools_events",
            "devtools_disconnect",
        ]

    def test_call_requires_method(self):
        schema, _strategy, _resets = server._TOOL_REGISTRY["devtools_call"]
        assert schema.inputSchema["required"] == ["method"]

    def test_only_disconnect_resets(self):
        resets = {name for name, (_s, _f, reset) in server._TOOL_REGISTRY.items() if reset}
        assert resets == {"devtools_disconnect"}


class TestDefaults:
    def test_fallbacks(self, monkeypatch):
        monkeypatch.delenv("DEVTOOLS_HOST", raising=False)
        monkeypatch.delenv("DEVTOOLS_PORT", raising=False)
        assert server.default_host() == DEFAULT_HOST
        assert server.default_port() == DEFAULT_PORT

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DEVTOOLS_HOST", "chrome.internal")
        monkeypatch.setenv("DEVTOOLS_PORT", "9333")
        assert server.default_host() == "chrome.internal"
        assert server.default_port() == 9333

    def test_invalid_port_is_ignored(self, monkeypatch):
        monkeypatch.setenv("DEVTOOLS_PORT", "ninety")
        assert server.default_port() == DEFAULT_PORT

    def test_connect_uses_environment(self, monkeypatch, transport):
        monkeypatch.setenv("DEVTOOLS_HOST", "chrome.internal")
        monkeypatch.setenv("DEVTOOLS_PORT", "9333")
        seen = []

        def connector(host, port):
            seen.append((host, port))
            return DevToolsClient(transport)

        text = run(server._connect(DevToolsSession(connector=connector), {}))
        assert seen == [("chrome.internal", 9333)]
        assert text == "Connected to DevTools at chrome.internal:9333."


class TestStrategies:
    def test_call_with_object_params(self, connected_session, transport):
        transport.push({"id": 1, "result": {}})
        text = run(server._call(connected_session, {"method": "Page.reload", "params": {"ignoreCache": True}}))
        assert text == "Page.reload -> (no result)"
        assert transport.sent_json[0]["params"] == {"ignoreCache": True}

    def test_call_with_json_string_params(self, connected_session, transport):
        transport.push({"id": 1, "result": {}})
        run(server._call(connected_session, {"method": "Page.reload", "params": '{"ignoreCache": false}'}))
        assert transport.sent_json[0]["params"] == {"ignoreCache": False}

    def test_call_with_invalid_json_params(self, connected_session, transport):
        text = run(server._call(connected_session, {"method": "Page.reload", "params": "{oops"}))
        assert text.startswith("Error: params is not valid JSON")
        assert transport.sent == []

    def test_call_with_non_object_params(self, connected_session, transport):
        text = run(server._call(connected_session, {"method": "Page.reload", "params": [1]}))
        assert text == "Error: params must be a JSON object."

    def test_unknown_tool(self):
        [content] = run(server.handle_call_tool("devtools_teleport", {}))
        assert content.text == "Unknown tool: devtools_teleport"

    def test_disconnect_resets_shared_session(self, monkeypatch, connected_session):
        monkeypatch.setattr(server, "_session", connected_session)
        [content] = run(server.handle_call_tool("devtools_disconnect", {}))
        assert content.text == "DevTools session ended."
        assert server._session is not connected_session
        assert not server._session.connected

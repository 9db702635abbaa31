"""
MCP server that exposes a Chrome DevTools connection as tools.

Thin layer on top of ``devtools_core.session.DevToolsSession``.
All heavy lifting (discovery, wire protocol, formatting) lives in the
shared ``devtools-core`` package.

Run::

    python -m devtools_mcp.server          # stdio transport

``DEVTOOLS_HOST`` / ``DEVTOOLS_PORT`` set the defaults for
``devtools_connect``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Any, Awaitable, Callable

import mcp.server.stdio
from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT
from devtools_core.session import DevToolsSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

# Each strategy is an async callable: (session, args) -> str
ToolStrategy = Callable[[DevToolsSession, dict[str, Any]], Awaitable[str]]

# ---------------------------------------------------------------------------
# Server + shared session
# ---------------------------------------------------------------------------

server = Server("devtools-mcp")
_session = DevToolsSession()


def default_host() -> str:
    return os.environ.get("DEVTOOLS_HOST") or DEFAULT_HOST


def default_port() -> int:
    raw = os.environ.get("DEVTOOLS_PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring DEVTOOLS_PORT=%r: not an integer", raw)
        return DEFAULT_PORT


# ---------------------------------------------------------------------------
# Tool strategies -- one per tool, maps name -> (schema, handler)
# ---------------------------------------------------------------------------


async def _connect(session: DevToolsSession, args: dict[str, Any]) -> str:
    host = args.get("host") or default_host()
    port = args.get("port") or default_port()
    return await session.connect(host=host, port=int(port))


async def _call(session: DevToolsSession, args: dict[str, Any]) -> str:
    params = args.get("params")
    # Some clients send the params object as a JSON string.
    if isinstance(params, str):
        try:
            params = json.loads(params) if params.strip() else None
        except json.JSONDecodeError as exc:
            logger.warning("Unparseable params for %s: %s", args.get("method"), exc)
            return f"Error: params is not valid JSON: {exc}"
    if params is not None and not isinstance(params, dict):
        return "Error: params must be a JSON object."
    return await session.call(method=args["method"], params=params)


async def _poll(session: DevToolsSession, args: dict[str, Any]) -> str:
    return await session.poll(count=int(args.get("count", 1)))


async def _events(session: DevToolsSession, args: dict[str, Any]) -> str:
    return await session.events()


async def _disconnect(session: DevToolsSession, args: dict[str, Any]) -> str:
    return await session.disconnect()


# ---------------------------------------------------------------------------
# Registry: tool name -> (Tool schema, strategy, resets session after?)
# ---------------------------------------------------------------------------

_TOOL_REGISTRY: dict[str, tuple[types.Tool, ToolStrategy, bool]] = {
    "devtools_connect": (
        types.Tool(
            name="devtools_connect",
            description=(
                "Connect to a browser started with --remote-debugging-port.  "
                "Attaches to the first target listed by its /json endpoint."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "host": {
                        "type": "string",
                        "description": "DevTools host.  Defaults to $DEVTOOLS_HOST or localhost.",
                    },
                    "port": {
                        "type": "integer",
                        "description": "DevTools port.  Defaults to $DEVTOOLS_PORT or 9222.",
                    },
                },
            },
        ),
        _connect,
        False,
    ),
    "devtools_call": (
        types.Tool(
            name="devtools_call",
            description=(
                "Invoke a protocol command (e.g. Page.navigate) and return its "
                "result.  Events received while waiting are buffered."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "method": {
                        "type": "string",
                        "description": "Fully qualified command name, Domain.command.",
                    },
                    "params": {
                        "type": "object",
                        "description": "Command parameters as a JSON object.",
                    },
                },
                "required": ["method"],
            },
        ),
        _call,
        False,
    ),
    "devtools_poll": (
        types.Tool(
            name="devtools_poll",
            description=(
                "Receive messages from the browser, then return and clear the "
                "buffered events.  Blocks until each message arrives."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "count": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "Number of messages to receive.  Defaults to 1.",
                    },
                },
            },
        ),
        _poll,
        False,
    ),
    "devtools_events": (
        types.Tool(
            name="devtools_events",
            description="Return and clear the buffered events without waiting.",
            inputSchema={"type": "object", "properties": {}},
        ),
        _events,
        False,
    ),
    "devtools_disconnect": (
        types.Tool(
            name="devtools_disconnect",
            description="Close the DevTools connection.",
            inputSchema={"type": "object", "properties": {}},
        ),
        _disconnect,
        True,  # reset session after disconnect
    ),
}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    return [schema for schema, _, _ in _TOOL_REGISTRY.values()]


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any] | None
) -> list[types.TextContent]:
    global _session  # noqa: PLW0603

    entry = _TOOL_REGISTRY.get(name)
    if entry is None:
        return [types.TextContent(type="text", text=f"Unknown tool: {name}")]

    _schema, strategy, resets = entry
    text = await strategy(_session, arguments or {})

    if resets:
        _session = DevToolsSession()

    return [types.TextContent(type="text", text=text)]


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


async def run() -> None:
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="devtools-mcp",
                server_version="0.1.0",
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main() -> None:
    # stdout carries the MCP stream; logs go to stderr.
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    asyncio.run(run())


if __name__ == "__main__":
    main()

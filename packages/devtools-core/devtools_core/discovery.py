"""Locate a debuggable target through the DevTools HTTP endpoint.

``GET http://<host>:<port>/json`` lists the targets; the first one's
``webSocketDebuggerUrl`` is where the RPC client connects.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from devtools_core.errors import DiscoveryError
from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT, TIMEOUT_DISCOVERY

logger = logging.getLogger(__name__)


def list_targets(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    *,
    http: httpx.Client | None = None,
) -> list[Any]:
    """Return the decoded ``/json`` target list."""
    url = f"http://{host}:{port}/json"
    client = http or httpx.Client(timeout=TIMEOUT_DISCOVERY)
    try:
        response = client.get(url)
        response.raise_for_status()
        targets = response.json()
    except httpx.HTTPError as exc:
        raise DiscoveryError(f"Unable to get {url}: {exc}") from exc
    except ValueError as exc:
        raise DiscoveryError(f"Invalid JSON data from {url}: {exc}") from exc
    finally:
        if http is None:
            client.close()

    if not isinstance(targets, list):
        raise DiscoveryError(f"{url} did not return a list: {targets!r}")
    return targets


def discover_websocket_url(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    *,
    http: httpx.Client | None = None,
) -> str:
    """Return the first target's ``webSocketDebuggerUrl``."""
    targets = list_targets(host, port, http=http)
    if not targets:
        raise DiscoveryError("/json payload is empty")

    first = targets[0]
    if not isinstance(first, dict) or "webSocketDebuggerUrl" not in first:
        raise DiscoveryError(f"/json response is missing webSocketDebuggerUrl: {targets!r}")

    url = first["webSocketDebuggerUrl"]
    if not isinstance(url, str):
        raise DiscoveryError(f"webSocketDebuggerUrl is not a string: {url!r}")

    logger.debug("Discovered target %s", url)
    return url

"""LLM-friendly formatting for DevTools results and events.

All functions return plain text optimised for consumption by large
language models: no ANSI codes, compact JSON, long values truncated.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from devtools_core.cdp_client import EventEnvelope
from devtools_core.models import ProtocolEvent

_MAX_VALUE_LENGTH = 2000
_MAX_EVENTS = 30


# ---------------------------------------------------------------------------
# Call results
# ---------------------------------------------------------------------------


def format_result(method: str, result: Any) -> str:
    """Format the result of one command.

    Example output::

        Page.navigate -> {"frameId": "F1", "loaderId": "L1"}
    """
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json", by_alias=True)
    if not result:
        return f"{method} -> (no result)"
    return f"{method} -> {_compact(result)}"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def format_event(event: ProtocolEvent | EventEnvelope) -> str:
    """One line per event: the wire tag followed by its parameters."""
    if isinstance(event, ProtocolEvent):
        method = event.METHOD
        params = event.model_dump(mode="json", by_alias=True)
    else:
        method = event.method
        params = event.params or {}

    if not params:
        return method
    return f"{method} {_compact(params)}"


def format_events(events: Sequence[ProtocolEvent | EventEnvelope]) -> str:
    """Format a batch of events, oldest first.

    More than ``_MAX_EVENTS`` entries are elided with a count.
    """
    if not events:
        return "(no events)"

    shown = events[:_MAX_EVENTS]
    lines = [f"  {format_event(event)}" for event in shown]
    remaining = len(events) - len(shown)
    if remaining > 0:
        lines.append(f"  ... and {remaining} more events")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _compact(value: Any) -> str:
    text = json.dumps(value, separators=(", ", ": "), ensure_ascii=False)
    if len(text) > _MAX_VALUE_LENGTH:
        text = text[:_MAX_VALUE_LENGTH] + "..."
    return text

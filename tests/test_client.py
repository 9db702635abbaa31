"""Tests for the synchronous RPC client over a scripted transport."""

from __future__ import annotations

from typing import ClassVar

import pytest
from pydantic import BaseModel

from devtools_core.cdp_client import (
    ConnectionState,
    DevToolsClient,
    EventEnvelope,
    WebSocketTransport,
)
from devtools_core.errors import CallError, DecodeError, TransportError
from devtools_core.models import EventRegistry, ProtocolEvent, RequestModel
from devtools_core.protocol import Transport

from conftest import FakeTransport


class Ticked(ProtocolEvent):
    METHOD: ClassVar[str] = "Clock.ticked"

    count: int


class _ScaleRequest(RequestModel):
    factor: float | None = None


class ScaleResult(BaseModel):
    width: int


class TestRequests:
    def test_ids_start_at_one_and_increase(self, client, transport):
        transport.push({"id": 1, "result": {}}, {"id": 2, "result": {}})
        client.invoke("A.first")
        client.invoke("A.second", {"x": 1})
        assert transport.sent_json == [
            {"id": 1, "method": "A.first", "params": {}},
            {"id": 2, "method": "A.second", "params": {"x": 1}},
        ]

    def test_request_model_params_omit_unset_fields(self, client, transport):
        transport.push({"id": 1, "result": {}})
        client.invoke("View.scale", _ScaleRequest())
        assert transport.sent_json[0]["params"] == {}

    def test_separate_clients_have_separate_ids(self):
        first, second = FakeTransport(), FakeTransport()
        first.push({"id": 1, "result": {}})
        second.push({"id": 1, "result": {}})
        DevToolsClient(first).invoke("A.x")
        DevToolsClient(second).invoke("A.y")
        assert first.sent_json[0]["id"] == second.sent_json[0]["id"] == 1

    def test_untyped_result_is_raw_json(self, client, transport):
        transport.push({"id": 1, "result": {"width": 3}})
        assert client.invoke("View.size") == {"width": 3}

    def test_typed_result_is_validated(self, client, transport):
        transport.push({"id": 1, "result": {"width": 3}})
        result = client.invoke("View.size", None, ScaleResult)
        assert result == ScaleResult(width=3)

    def test_mismatched_result_is_decode_error(self, client, transport):
        transport.push({"id": 1, "result": {"width": "wide"}})
        with pytest.raises(DecodeError, match="View.size"):
            client.invoke("View.size", None, ScaleResult)


class TestCorrelation:
    def test_event_then_reordered_responses(self, client, transport):
        """Responses are matched by id, not by arrival order."""
        transport.push(
            {"method": "Clock.ticked", "params": {"count": 1}},
            {"id": 2, "result": {"which": "second"}},
            {"id": 1, "result": {"which": "first"}},
        )
        first = client.invoke("A.first")
        assert first == {"which": "first"}
        assert [r.id for r in client.pending_responses] == [2]

        # id 2 is claimed from the buffer without another read.
        second = client.invoke("A.second")
        assert second == {"which": "second"}
        assert [m["id"] for m in transport.sent_json] == [1, 2]
        assert client.pending_responses == ()

        events = client.drain_events()
        assert [e.method for e in events] == ["Clock.ticked"]

    def test_buffered_response_is_returned_without_reading(self, transport):
        client = DevToolsClient(transport)
        transport.push({"id": 2, "result": {"n": 2}}, {"id": 1, "result": {"n": 1}})
        assert client.invoke("A.one") == {"n": 1}
        assert client.invoke("A.two") == {"n": 2}
        assert client.pending_responses == ()
        assert not transport.incoming

    @pytest.mark.parametrize(
        "order",
        [(1, 2, 3), (3, 2, 1), (2, 3, 1), (3, 1, 2)],
    )
    def test_any_delivery_order(self, client, transport, order):
        for index, msg_id in enumerate(order):
            transport.push({"method": "Clock.ticked", "params": {"count": index}})
            transport.push({"id": msg_id, "result": {"id": msg_id}})

        results = [client.invoke(f"A.call{n}") for n in (1, 2, 3)]

        assert results == [{"id": 1}, {"id": 2}, {"id": 3}]
        counts = [e.params["count"] for e in client.drain_events()]
        assert counts == sorted(counts)

    def test_events_keep_arrival_order(self, client, transport):
        transport.push(
            {"method": "Clock.ticked", "params": {"count": 1}},
            {"method": "Clock.ticked", "params": {"count": 2}},
            {"id": 1, "result": {}},
            {"method": "Clock.ticked", "params": {"count": 3}},
        )
        client.invoke("Clock.start")
        client.poll()
        assert [e.params["count"] for e in client.drain_events()] == [1, 2, 3]
        assert client.drain_events() == []


class TestErrors:
    def test_error_response_raises_call_error(self, client, transport):
        transport.push(
            {"id": 1, "error": {"code": -32601, "message": "'A.nope' wasn't found", "data": "x"}}
        )
        with pytest.raises(CallError) as excinfo:
            client.invoke("A.nope")
        err = excinfo.value
        assert err.method == "A.nope"
        assert err.code == -32601
        assert err.message == "'A.nope' wasn't found"
        assert err.data == "x"
        assert str(err) == "A.nope: 'A.nope' wasn't found (code -32601)"

    def test_response_without_result_or_error(self, client, transport):
        transport.push({"id": 1})
        with pytest.raises(CallError, match="carried no result") as excinfo:
            client.invoke("A.empty")
        assert excinfo.value.code is None

    def test_error_keeps_client_open(self, client, transport):
        transport.push({"id": 1, "error": {"code": -1, "message": "bad"}}, {"id": 2, "result": {}})
        with pytest.raises(CallError):
            client.invoke("A.bad")
        assert client.state is ConnectionState.OPEN
        assert client.invoke("A.good") == {}

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", b"\x00\x01"])
    def test_undecodable_message(self, client, transport, raw):
        transport.push(raw)
        with pytest.raises(DecodeError):
            client.poll()

    def test_malformed_response_envelope(self, client, transport):
        transport.push({"id": "one", "result": {}})
        with pytest.raises(DecodeError, match="Malformed response"):
            client.poll()

    def test_event_without_method(self, client, transport):
        transport.push({"params": {}})
        with pytest.raises(DecodeError, match="Malformed event"):
            client.poll()

    def test_transport_failure_closes_client(self, client, transport):
        with pytest.raises(TransportError):
            client.poll()
        assert client.state is ConnectionState.CLOSED

        with pytest.raises(TransportError, match="closed"):
            client.invoke("A.x")
        assert transport.sent == []

    def test_send_failure_closes_client(self, client, transport):
        transport.fail_send = True
        with pytest.raises(TransportError):
            client.invoke("A.x")
        assert client.state is ConnectionState.CLOSED


class TestEventRegistry:
    def test_registered_events_are_typed(self, transport):
        client = DevToolsClient(transport, events=EventRegistry([Ticked]))
        transport.push({"method": "Clock.ticked", "params": {"count": 4}})
        client.poll()
        [event] = client.drain_events()
        assert isinstance(event, Ticked)
        assert event.count == 4

    def test_unknown_event_tag_is_decode_error(self, transport):
        client = DevToolsClient(transport, events=EventRegistry([Ticked]))
        transport.push({"method": "Clock.stopped", "params": {}})
        with pytest.raises(DecodeError, match="Unknown event"):
            client.poll()

    def test_without_registry_events_are_envelopes(self, client, transport):
        transport.push({"method": "Clock.stopped"})
        client.poll()
        assert client.drain_events() == [EventEnvelope(method="Clock.stopped")]


class TestLifecycle:
    def test_client_without_transport_is_connecting(self):
        client = DevToolsClient()
        assert client.state is ConnectionState.CONNECTING
        with pytest.raises(TransportError, match="connecting"):
            client.poll()

    def test_close(self, client, transport):
        client.close()
        assert transport.closed
        assert client.state is ConnectionState.CLOSED

    def test_close_after_transport_failure_still_closes_transport(self, client, transport):
        with pytest.raises(TransportError):
            client.poll()
        assert client.state is ConnectionState.CLOSED

        client.close()

        assert transport.closed

    def test_fake_and_websocket_transports_satisfy_protocol(self, transport):
        assert isinstance(transport, Transport)
        assert hasattr(WebSocketTransport, "open")

    def test_connect_runs_discovery_then_opens(self, monkeypatch, transport):
        calls = []

        def fake_discover(host, port):
            calls.append((host, port))
            return "ws://127.0.0.1:9333/devtools/page/1"

        def fake_open(url):
            calls.append(url)
            return transport

        monkeypatch.setattr("devtools_core.cdp_client.discover_websocket_url", fake_discover)
        monkeypatch.setattr(WebSocketTransport, "open", staticmethod(fake_open))

        client = DevToolsClient.connect(9333, "127.0.0.1")

        assert calls == [("127.0.0.1", 9333), "ws://127.0.0.1:9333/devtools/page/1"]
        assert client.state is ConnectionState.OPEN

    def test_failed_open_leaves_client_closed(self, monkeypatch):
        def fake_discover(host, port):
            raise TransportError("refused")

        monkeypatch.setattr("devtools_core.cdp_client.discover_websocket_url", fake_discover)
        client = DevToolsClient()
        with pytest.raises(TransportError):
            client.open()
        assert client.state is ConnectionState.CLOSED

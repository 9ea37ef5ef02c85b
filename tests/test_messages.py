import json

import pytest

from mcpws.exceptions import MalformedMessage
from mcpws.messages import Envelope, ErrorDetail


def test_parse_request_with_numeric_id() -> None:
    envelope = Envelope.from_wire('{"jsonrpc": "2.0", "id": 7, "method": "tools/list"}')
    assert envelope.id == 7
    assert envelope.method == "tools/list"
    assert not envelope.is_notification


def test_parse_request_with_string_id() -> None:
    envelope = Envelope.from_wire('{"jsonrpc": "2.0", "id": "req-1", "method": "initialize", "params": {}}')
    assert envelope.id == "req-1"
    assert envelope.params == {}


def test_missing_id_is_notification_but_null_id_is_not() -> None:
    assert Envelope.from_wire('{"jsonrpc": "2.0", "method": "ping"}').is_notification
    assert not Envelope.from_wire('{"jsonrpc": "2.0", "id": null, "method": "ping"}').is_notification


def test_client_response_is_recognised() -> None:
    envelope = Envelope.from_wire('{"jsonrpc": "2.0", "id": 1, "result": {}}')
    assert envelope.is_response


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2, 3]",
        '"hello"',
        '{"jsonrpc": "1.0", "id": 1, "method": "initialize"}',
        '{"jsonrpc": "2.0", "id": {"nested": true}, "method": "initialize"}',
        '{"jsonrpc": "2.0", "id": 1, "result": {}, "error": {"code": -32603, "message": "boom"}}',
        '{"jsonrpc": "2.0", "id": 1, "error": {"message": "missing code"}}',
        '{"jsonrpc": "2.0", "id": NaN, "method": "initialize"}',
        '{"jsonrpc": "2.0", "id": Infinity, "method": "initialize"}',
        '{"jsonrpc": "2.0", "id": 1, "result": null, "error": {"code": -32603, "message": "boom"}}',
    ],
)
def test_malformed_messages_are_rejected(raw: str) -> None:
    with pytest.raises(MalformedMessage):
        Envelope.from_wire(raw)


def test_to_wire_omits_absent_members() -> None:
    request = Envelope(id=3, method="tools/list")
    response = Envelope.success(request, {"tools": []})
    assert json.loads(response.to_wire()) == {"jsonrpc": "2.0", "id": 3, "result": {"tools": []}}


def test_to_wire_keeps_explicit_null_id() -> None:
    request = Envelope.from_wire('{"jsonrpc": "2.0", "id": null, "method": "foo"}')
    response = Envelope.failure(request, ErrorDetail(code=-32601, message="Method not found: foo"))
    assert json.loads(response.to_wire()) == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32601, "message": "Method not found: foo"},
    }


@pytest.mark.parametrize(
    "envelope",
    [
        Envelope(id=1, method="tools/call", params={"name": "echo", "arguments": {"message": "hi"}}),
        Envelope(id="abc", result={"content": [{"type": "text", "text": "Echo: hi"}]}),
        Envelope(id=1, result=None),
        Envelope(method="notifications/initialized"),
        Envelope(id=2, error=ErrorDetail(code=-32602, message="Invalid params", data={"field": "name"})),
    ],
)
def test_wire_round_trip(envelope: Envelope) -> None:
    decoded = Envelope.from_wire(envelope.to_wire())
    assert decoded.model_dump() == envelope.model_dump()
    assert decoded.is_notification == envelope.is_notification
    assert decoded.has_result == envelope.has_result


def test_null_result_is_kept() -> None:
    envelope = Envelope.from_wire('{"jsonrpc": "2.0", "id": 1, "result": null}')
    assert envelope.has_result
    assert envelope.is_response
    assert json.loads(envelope.to_wire()) == {"jsonrpc": "2.0", "id": 1, "result": None}

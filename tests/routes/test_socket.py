"""
Tests for the WebSocket transport.

Each request frame gets exactly one response frame with the same id.
"""

import json


def call(websocket, frame):
    """Send one request frame and return the response frame."""
    websocket.send_text(json.dumps(frame))
    return websocket.receive_json()


class TestSocketCalls:
    """Successful calls over the socket."""

    def test_static_method(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 1, "method": "Echo.optional", "args": {"arg": "2.5,3"}})

        assert reply == {"id": 1, "result": {"lat": 2.5, "lng": 3}}

    def test_prototype_method(self, client):
        frame = {
            "id": "call-2",
            "method": "Echo.prototype.describe",
            "ctorArgs": {"id": "home"},
            "args": {"greeting": "Hi"},
        }

        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, frame)

        assert reply == {"id": "call-2", "result": {"id": "home", "message": "Hi from home"}}

    def test_arguments_are_bound_sloppily(self, client):
        """Native JSON values and wire strings are both accepted."""
        with client.websocket_connect("/socket") as websocket:
            from_list = call(websocket, {"id": 1, "method": "Echo.optional", "args": {"arg": [1, 2]}})
            from_json_text = call(websocket, {"id": 2, "method": "Echo.optional", "args": {"arg": "[3,4]"}})

        assert from_list["result"] == {"lat": 1, "lng": 2}
        assert from_json_text["result"] == {"lat": 3, "lng": 4}

    def test_undefined_result_has_no_result_key(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 5, "method": "Echo.optional"})

        assert reply == {"id": 5}

    def test_null_result(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 6, "method": "Echo.optional", "args": {"arg": None}})

        assert reply == {"id": 6, "result": None}

    def test_missing_result_fields_are_omitted(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 7, "method": "Echo.partial"})

        assert reply == {"id": 7, "result": {"a": 1}}

    def test_many_calls_on_one_connection(self, client):
        with client.websocket_connect("/socket") as websocket:
            replies = [
                call(websocket, {"id": i, "method": "Echo.optional", "args": {"arg": f"{i},{i}"}})
                for i in range(3)
            ]

        assert [reply["id"] for reply in replies] == [0, 1, 2]
        assert replies[2]["result"] == {"lat": 2, "lng": 2}


class TestSocketErrors:
    """Error frames."""

    def test_invalid_argument(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 3, "method": "Echo.required", "args": {"arg": "2.3"}})

        assert reply == {
            "id": 3,
            "error": {"message": 'Value is not of correct "lat,lng" format', "statusCode": 400},
        }

    def test_unknown_method(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 4, "method": "Echo.nope"})

        assert reply["id"] == 4
        assert reply["error"]["statusCode"] == 404

    def test_malformed_method_name(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 7, "method": "Echo"})

        assert reply["error"]["statusCode"] == 404

    def test_target_error_status_kept(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 8, "method": "Echo.fail", "args": {"status": 409}})

        assert reply == {"id": 8, "error": {"message": "Rejected by target", "statusCode": 409}}

    def test_unparseable_frame(self, client):
        with client.websocket_connect("/socket") as websocket:
            websocket.send_text("{not json")
            reply = websocket.receive_json()

        assert reply == {"id": None, "error": {"message": "Cannot parse JSON-encoded message.", "statusCode": 400}}

    def test_frame_without_method(self, client):
        with client.websocket_connect("/socket") as websocket:
            reply = call(websocket, {"id": 9, "args": {}})

        assert reply == {"id": 9, "error": {"message": "Invalid remote call message.", "statusCode": 400}}

    def test_connection_survives_errors(self, client):
        with client.websocket_connect("/socket") as websocket:
            call(websocket, {"id": 1, "method": "Echo.crash"})
            reply = call(websocket, {"id": 2, "method": "Echo.optional", "args": {"arg": "1,1"}})

        assert reply == {"id": 2, "result": {"lat": 1, "lng": 1}}

"""
Tests for the gear-mode web interface.

Run with:  python -m pytest test_web_interface.py -v
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from config_manager import GearModeConfig
from gearmode import create_dispatcher
from web_interface import GearModeWebInterface, create_app


@pytest.fixture
def web():
    config = GearModeConfig()
    config.modes["Offense"] = ["Normal", "Acc", "Multi"]
    web_interface = GearModeWebInterface(create_dispatcher(config), config)
    return web_interface


@pytest.fixture
def client(web):
    return TestClient(create_app(web))


class TestRestApi:

    def test_state(self, client):
        response = client.get("/api/state")
        assert response.status_code == 200
        assert response.json()["offense_mode"] == "Normal"

    def test_modes(self, client):
        modes = client.get("/api/modes").json()
        assert modes["Offense"] == ["Normal", "Acc", "Multi"]
        assert modes["Target"] == ["default", "stpc", "stpt", "stal"]

    def test_status_lists_commands(self, client):
        status = client.get("/api/status").json()
        assert "cycle" in status["commands"]
        assert status["hooks"] == []

    def test_command_changes_state(self, client, web):
        response = client.post("/api/command", json={"command": "cycle offensemode"})
        body = response.json()
        assert response.status_code == 200
        assert body["recognized"] is True
        assert body["result"]["handled"] is True
        assert body["result"]["summary"] == "Offense mode is now Acc."
        assert body["state"]["offense_mode"] == "Acc"
        assert web.session.state.offense_mode == "Acc"

    def test_rejected_command(self, client):
        body = client.post("/api/command", json={"command": "set offensemode Bogus"}).json()
        assert body["result"]["handled"] is False
        assert body["result"]["details"]["reason"] == "invalid_mode_value"
        assert body["state"]["offense_mode"] == "Normal"

    def test_unknown_verb(self, client):
        body = client.post("/api/command", json={"command": "dance"}).json()
        assert body["recognized"] is False
        assert body["result"] is None

    def test_empty_command(self, client):
        assert client.post("/api/command", json={"command": "  "}).status_code == 400

    def test_messages(self, client):
        client.post("/api/command", json={"command": "toggle kiting"})
        messages = client.get("/api/messages").json()["messages"]
        assert [m["text"] for m in messages] == ["Kiting is now on."]
        assert messages[0]["priority"] == 122


class TestWebSocket:

    def test_initial_status_then_command(self, client):
        with client.websocket_connect("/ws") as ws:
            hello = ws.receive_json()
            assert hello["type"] == "initial_status"
            assert hello["data"]["state"]["kiting"] is False

            ws.send_json({"type": "command", "command": "activate kiting"})
            reply = ws.receive_json()
            assert reply["type"] == "command_result"
            assert reply["data"]["state"]["kiting"] is True

    def test_get_state(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "get_state"})
            reply = ws.receive_json()
            assert reply["type"] == "state"
            assert reply["data"]["pc_target_mode"] == "default"

    def test_invalid_json(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

    def test_unknown_message_type(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "dance"})
            reply = ws.receive_json()
            assert reply["type"] == "error"
            assert "dance" in reply["message"]


class FakeClient:
    """Stand-in WebSocket that records sent frames"""

    def __init__(self, on_send=None, fail=False):
        self.sent = []
        self.on_send = on_send
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(text)
        if self.on_send is not None:
            self.on_send()


class TestBroadcast:

    def test_client_joining_mid_broadcast(self, web):
        late = FakeClient()
        early = FakeClient(on_send=lambda: web.websocket_clients.add(late))
        web.websocket_clients.add(early)

        asyncio.run(web.broadcast_to_all({"type": "state"}))

        assert len(early.sent) == 1
        assert late in web.websocket_clients

    def test_failed_client_is_dropped(self, web, caplog):
        good = FakeClient()
        broken = FakeClient(fail=True)
        web.websocket_clients.update({good, broken})

        asyncio.run(web.broadcast_to_all({"type": "state"}))

        assert web.websocket_clients == {good}
        assert len(good.sent) == 1
        assert "Failed to broadcast to client" in caplog.text

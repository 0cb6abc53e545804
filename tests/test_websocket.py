"""Tests for organization rooms over WebSocket."""

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from statuspage.core.websocket import RoomManager, room_name
from statuspage.services import org_service


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.sent: list[str] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


# =============================================================================
# RoomManager
# =============================================================================

def test_room_name():
    assert room_name("abc") == "org:abc"


@pytest.mark.asyncio
async def test_publish_reaches_room_members_only():
    rooms = RoomManager()
    a, b, outsider = FakeSocket(), FakeSocket(), FakeSocket()
    await rooms.join(a, "org-1")
    await rooms.join(b, "org-1")
    await rooms.join(outsider, "org-2")

    delivered = await rooms.publish("org-1", {"event": "service:updated", "id": "svc"})

    assert delivered == 2
    assert json.loads(a.sent[0]) == {"event": "service:updated", "id": "svc"}
    assert len(b.sent) == 1
    assert outsider.sent == []


@pytest.mark.asyncio
async def test_leave_and_disconnect():
    rooms = RoomManager()
    ws = FakeSocket()
    await rooms.join(ws, "org-1")
    await rooms.join(ws, "org-2")
    assert rooms.room_size("org-1") == 1

    await rooms.leave(ws, "org-1")
    assert rooms.room_size("org-1") == 0
    assert rooms.room_size("org-2") == 1

    await rooms.disconnect(ws)
    assert rooms.room_size("org-2") == 0


@pytest.mark.asyncio
async def test_failed_send_drops_connection():
    rooms = RoomManager()
    good, dead = FakeSocket(), FakeSocket(fail=True)
    await rooms.join(good, "org-1")
    await rooms.join(dead, "org-1")

    assert await rooms.publish("org-1", {"event": "ping"}) == 1
    assert rooms.room_size("org-1") == 1


@pytest.mark.asyncio
async def test_publish_to_empty_room():
    assert await RoomManager().publish("nobody", {"event": "ping"}) == 0


# =============================================================================
# /ws endpoint
# =============================================================================

def test_ws_requires_authentication(app):
    client = TestClient(app)
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws"):
            pass
    assert exc.value.code == 4001


def test_ws_rejects_invalid_token(app):
    client = TestClient(app)
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws?token=not-a-jwt"):
            pass
    assert exc.value.code == 4001


def test_ws_ping_pong(app, token_factory):
    client = TestClient(app)
    token = token_factory("user_bob", "org_acme", "org:member")
    with client.websocket_connect(f"/ws?token={token}") as ws:
        ws.send_text("ping")
        assert ws.receive_text() == "pong"


def test_ws_join_and_leave_own_organization(app, db, token_factory):
    client = TestClient(app)
    token = token_factory("user_bob", "org_acme", "org:member")
    rooms = app.state.rooms

    with client.websocket_connect(f"/ws?token={token}") as ws:
        org = org_service.get_org_by_external_id(db, "org_acme")
        org_id = str(org.id)

        ws.send_json({"event": "join:organization", "organizationId": org_id})
        assert ws.receive_json() == {"event": "joined", "room": f"org:{org_id}"}
        assert rooms.room_size(org_id) == 1

        ws.send_json({"event": "leave:organization", "organizationId": org_id})
        assert ws.receive_json() == {"event": "left", "room": f"org:{org_id}"}
        assert rooms.room_size(org_id) == 0

        ws.send_json({"event": "join:organization", "organizationId": org_id})
        ws.receive_json()

    assert rooms.room_size(org_id) == 0


def test_ws_cannot_join_other_organization(app, token_factory):
    client = TestClient(app)
    token = token_factory("user_bob", "org_acme", "org:member")
    with client.websocket_connect(f"/ws?token={token}") as ws:
        ws.send_json({"event": "join:organization", "organizationId": "someone-else"})
        reply = ws.receive_json()
        assert reply["event"] == "error"

        ws.send_text("not json")
        assert ws.receive_json()["event"] == "error"

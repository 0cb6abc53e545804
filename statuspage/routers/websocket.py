"""
WebSocket router for real-time status updates.

Provides a WebSocket endpoint that:
1. Authenticates users via session token (query param, header or cookie)
2. Lets the connection join or leave its organization's room
3. Answers heartbeat pings
"""

import json
import logging

import jwt
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from statuspage.core.security import decode_session_token, extract_session_token
from statuspage.schemas.auth import UserSession
from statuspage.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["WebSocket"])

JOIN_EVENT = "join:organization"
LEAVE_EVENT = "leave:organization"


def _authenticate(websocket: WebSocket, token: str | None) -> UserSession | None:
    state = websocket.app.state
    settings = state.settings
    token = token or extract_session_token(websocket, settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        claims = decode_session_token(token, settings)
    except jwt.InvalidTokenError:
        return None

    db = state.session_factory()
    try:
        return auth_service.resolve_session(
            db, state.identity_provider, claims, settings.SUPERADMIN_USERNAME
        )
    finally:
        db.close()


@router.websocket("/ws")
async def websocket_rooms(
    websocket: WebSocket,
    token: str | None = Query(None),
):
    """
    WebSocket endpoint for organization rooms.

    Client frames:
    - ``ping`` -> ``pong``
    - ``{"event": "join:organization", "organizationId": "<id>"}``
    - ``{"event": "leave:organization", "organizationId": "<id>"}``

    Only the caller's own organization can be joined.
    """
    session = await run_in_threadpool(_authenticate, websocket, token)
    if session is None:
        await websocket.close(code=4001, reason="Authentication required")
        return

    rooms = websocket.app.state.rooms
    await websocket.accept()
    try:
        while True:
            try:
                data = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            if data == "ping":
                await websocket.send_text("pong")
                continue

            try:
                frame = json.loads(data)
            except ValueError:
                await websocket.send_json({"event": "error", "message": "Invalid message"})
                continue
            if not isinstance(frame, dict):
                await websocket.send_json({"event": "error", "message": "Invalid message"})
                continue

            event = frame.get("event")
            org_id = str(frame.get("organizationId") or "")
            if event not in (JOIN_EVENT, LEAVE_EVENT):
                await websocket.send_json({"event": "error", "message": "Unknown event"})
                continue
            if session.organization_id is None or org_id != str(session.organization_id):
                await websocket.send_json({"event": "error", "message": "Forbidden"})
                continue

            if event == JOIN_EVENT:
                room = await rooms.join(websocket, org_id)
                await websocket.send_json({"event": "joined", "room": room})
            else:
                room = await rooms.leave(websocket, org_id)
                await websocket.send_json({"event": "left", "room": room})
    finally:
        await rooms.disconnect(websocket)

"""
WebSocket room manager for real-time status updates.

Connections join per-organization rooms named ``org:<id>`` so that
status changes can be pushed to everyone watching that organization.
"""

from typing import Dict, Set
from uuid import UUID
import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def room_name(org_id: UUID | str) -> str:
    return f"org:{org_id}"


class RoomManager:
    """Tracks which WebSocket connections are in which organization room."""

    def __init__(self):
        # room -> set of member connections
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def join(self, websocket: WebSocket, org_id: UUID | str) -> str:
        """Add a connection to an organization's room."""
        room = room_name(org_id)
        async with self._lock:
            self._rooms.setdefault(room, set()).add(websocket)
        return room

    async def leave(self, websocket: WebSocket, org_id: UUID | str) -> str:
        """Remove a connection from an organization's room."""
        room = room_name(org_id)
        async with self._lock:
            self._discard(room, websocket)
        return room

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection from every room it joined."""
        async with self._lock:
            for room in list(self._rooms):
                self._discard(room, websocket)

    async def publish(self, org_id: UUID | str, message: dict) -> int:
        """Send a message to every connection in an organization's room.

        Connections that fail to receive are dropped. Returns the number of
        connections the message reached.
        """
        room = room_name(org_id)
        async with self._lock:
            connections = self._rooms.get(room, set()).copy()

        if not connections:
            return 0

        data = json.dumps(message, default=str)
        closed = []
        for ws in connections:
            try:
                await ws.send_text(data)
            except Exception as exc:
                logger.info("Dropping closed connection from %s: %s", room, exc)
                closed.append(ws)

        if closed:
            async with self._lock:
                for ws in closed:
                    self._discard(room, ws)
        return len(connections) - len(closed)

    def room_size(self, org_id: UUID | str) -> int:
        """Number of connections currently in an organization's room."""
        return len(self._rooms.get(room_name(org_id), set()))

    def _discard(self, room: str, websocket: WebSocket) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(websocket)
        if not members:
            del self._rooms[room]

"""
WebSocket presence manager.

Each authenticated user has a room named after their GUID. A client joins
its room by sending ``{"type": "join-room"}`` on the presence socket; the
manager records the socket in the room and logs joins and leaves. Several
sockets (tabs, devices) can share one room.

Usage:
    from backend.src.utils.websocket import get_presence_manager

    manager = get_presence_manager()

    # In WebSocket endpoint
    await manager.join(user_guid, websocket)
    try:
        while True:
            await websocket.receive_json()
    except WebSocketDisconnect:
        manager.leave(user_guid, websocket)
"""

import asyncio
from typing import Dict, Set, Optional
from fastapi import WebSocket
from backend.src.utils.logging_config import get_logger

logger = get_logger("websocket")


class PresenceManager:
    """
    Tracks which users currently have an open presence socket.

    Maintains a mapping of room names (user GUIDs) to sets of connected
    WebSocket clients.
    """

    def __init__(self):
        """Initialize the manager with an empty room registry."""
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def join(self, room: str, websocket: WebSocket) -> None:
        """
        Register an already-accepted WebSocket in a room.

        Args:
            room: Room name (the user's GUID)
            websocket: Accepted WebSocket connection
        """
        async with self._lock:
            sockets = self._rooms.setdefault(room, set())
            already_joined = websocket in sockets
            sockets.add(websocket)
        if not already_joined:
            logger.info(
                f"User joined presence room {room}. "
                f"Connections in room: {len(self._rooms[room])}"
            )

    def leave(self, room: str, websocket: WebSocket) -> None:
        """
        Remove a WebSocket from a room.

        Note:
            This method is synchronous for use in exception handlers.
        """
        if room not in self._rooms:
            return
        self._rooms[room].discard(websocket)
        logger.info(
            f"User left presence room {room}. "
            f"Remaining connections: {len(self._rooms[room])}"
        )
        if not self._rooms[room]:
            del self._rooms[room]

    def is_online(self, room: str) -> bool:
        """Check if a user has at least one open presence socket."""
        return bool(self._rooms.get(room))


# Global manager instance
_presence_manager: Optional[PresenceManager] = None


def get_presence_manager() -> PresenceManager:
    """
    Get the global presence manager instance.

    Returns:
        Singleton PresenceManager instance
    """
    global _presence_manager
    if _presence_manager is None:
        _presence_manager = PresenceManager()
    return _presence_manager

"""
Presence WebSocket endpoint.

Clients connect with ``/ws/presence?token=<jwt>`` and send
``{"type": "join-room"}`` to join the room named after their user GUID.
The socket is removed from the room when the client disconnects.
"""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.src.middleware.actor import get_websocket_actor_context
from backend.src.utils.logging_config import get_logger
from backend.src.utils.websocket import get_presence_manager


logger = get_logger("websocket")

router = APIRouter(tags=["Presence"])

# Application-defined close code for a missing or rejected token
WS_CLOSE_UNAUTHORIZED = 4001


# ============================================================================
# WebSocket Endpoint
# ============================================================================

@router.websocket("/ws/presence")
async def presence_websocket(websocket: WebSocket):
    """
    WebSocket endpoint for user presence.

    Message format (client to server):
    {
        "type": "join-room"
    }

    Reply once joined:
    {
        "type": "joined",
        "room": "usr_..."
    }

    A plain ``ping`` text frame is answered with ``pong``.
    """
    await websocket.accept()

    actor = await get_websocket_actor_context(websocket)
    if actor is None:
        logger.info("Rejected unauthenticated presence socket")
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED)
        return

    manager = get_presence_manager()
    room = actor.user_guid
    joined = False

    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
                continue

            try:
                message = json.loads(data)
            except ValueError:
                logger.debug(f"Ignoring non-JSON presence message from {room}")
                continue

            if isinstance(message, dict) and message.get("type") == "join-room":
                await manager.join(room, websocket)
                joined = True
                await websocket.send_json({"type": "joined", "room": room})
    except WebSocketDisconnect:
        logger.info(f"Presence socket disconnected for {actor.username}")
    finally:
        if joined:
            manager.leave(room, websocket)
            if not manager.is_online(room):
                logger.info(f"{actor.username} is offline")

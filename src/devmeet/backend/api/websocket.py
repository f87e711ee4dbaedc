"""WebSocket API for realtime chat between connected peers"""

import logging
from datetime import datetime
from typing import Any
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..auth import get_user_from_token
from ..enums import RealtimeEvent
from ..exceptions import AuthenticationError
from ..services import RequestService
from ..websocket import RoomRouter

logger = logging.getLogger(__name__)

router = APIRouter()


def _peer_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


async def _send_error(websocket: WebSocket, message: str):
    await websocket.send_json({
        "event": RealtimeEvent.ERROR.value,
        "data": {"message": message},
    })


async def _is_connected(db: AsyncSession, user_id: int, peer_id: int) -> bool:
    # The session outlives many frames; reload the pair instead of trusting the identity map
    db.expire_all()
    return await RequestService.are_connected(db, user_id, peer_id)


@router.websocket("/ws/chat")
async def websocket_chat_endpoint(
    websocket: WebSocket,
    token: str = Query(...),
    db: AsyncSession = Depends(get_session)
):
    """
    Chat WebSocket endpoint.

    Only peers with an accepted connection request can share a room.

    Protocol:

    Client → Server:
    {"type": "joinRoom", "targetUserId": 2}
    {"type": "sendMessage", "receiverId": 2, "text": "hi", ...}
    {"type": "typing", "targetUserId": 2, "isTyping": true}

    Server → Client:
    {"event": "roomJoined", "data": {"roomId": "1-2"}}
    {"event": "receiveMessage", "data": {"senderId": 1, "receiverId": 2, ...}}
    {"event": "userTyping", "data": {"userId": 1, "isTyping": true}}
    {"event": "error", "data": {"message": "error description"}}
    """

    # 1. Verify token and get user
    try:
        current_user = await get_user_from_token(token, db)
    except AuthenticationError as e:
        logger.warning(f"WebSocket auth failed: {e.message}")
        await websocket.close(code=4401, reason="Unauthorized")
        return

    # 2. Accept WebSocket connection
    await websocket.accept()
    user_id = current_user.id
    first_name, last_name = current_user.firstname, current_user.lastname
    room_router: RoomRouter = websocket.app.state.room_router
    logger.info(f"Chat WebSocket accepted for user {user_id}")

    try:
        # 3. Route client events
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await _send_error(websocket, "Malformed message")
                continue
            if not isinstance(data, dict):
                await _send_error(websocket, "Malformed message")
                continue

            message_type = data.get("type")

            if message_type == RealtimeEvent.JOIN_ROOM.value:
                peer_id = _peer_id(data.get("targetUserId"))
                if peer_id is None:
                    await _send_error(websocket, "Missing targetUserId")
                    continue
                if not await _is_connected(db, user_id, peer_id):
                    logger.warning(f"User {user_id} tried to join room with non-connection {peer_id}")
                    await _send_error(websocket, "You can only chat with your connections")
                    continue
                room = room_router.join_room(websocket, user_id, peer_id)
                await websocket.send_json({
                    "event": RealtimeEvent.ROOM_JOINED.value,
                    "data": {"roomId": room},
                })

            elif message_type == RealtimeEvent.SEND_MESSAGE.value:
                sender_id = data.get("senderId", user_id)
                if _peer_id(sender_id) != user_id:
                    await _send_error(websocket, "Cannot send messages as another user")
                    continue
                peer_id = _peer_id(data.get("receiverId"))
                if peer_id is None:
                    await _send_error(websocket, "Missing receiverId")
                    continue
                if not data.get("text"):
                    await _send_error(websocket, "Missing message text")
                    continue
                if not await _is_connected(db, user_id, peer_id):
                    await _send_error(websocket, "You can only chat with your connections")
                    continue

                payload = {k: v for k, v in data.items() if k != "type"}
                payload["senderId"] = user_id
                payload["receiverId"] = peer_id
                payload.setdefault("firstName", first_name)
                payload.setdefault("lastName", last_name)
                payload.setdefault("timestamp", datetime.now().isoformat())
                await room_router.send_message(payload)

            elif message_type == RealtimeEvent.TYPING.value:
                peer_id = _peer_id(data.get("targetUserId"))
                if peer_id is None:
                    await _send_error(websocket, "Missing targetUserId")
                    continue
                if not await _is_connected(db, user_id, peer_id):
                    await _send_error(websocket, "You can only chat with your connections")
                    continue
                await room_router.set_typing(
                    websocket, user_id, peer_id, bool(data.get("isTyping"))
                )

            else:
                logger.warning(f"Unknown message type from client: {message_type}")
                await _send_error(websocket, f"Unknown message type: {message_type}")

    except WebSocketDisconnect:
        logger.info(f"Chat WebSocket disconnected: user {user_id}")
    except Exception as e:
        logger.error(f"Chat WebSocket error for user {user_id}: {e}", exc_info=True)
        await websocket.close(code=1011)
    finally:
        # 4. Cleanup
        room_router.disconnect(websocket)
        logger.info(f"Chat WebSocket cleanup completed for user {user_id}")

"""Realtime room router

Every pair of peers shares one room whose id is derived from the two user
ids, so both sides converge on the same channel without a lookup table.
Membership lives only as long as the WebSocket connection.
"""

import asyncio
import logging
from typing import Any, Dict, Protocol
from ..enums import RealtimeEvent

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything that can receive JSON frames (a Starlette ``WebSocket``)"""

    async def send_json(self, data: Any) -> None: ...


def room_id(user_a: Any, user_b: Any) -> str:
    """Canonical room id of two peers, independent of who initiates

    >>> room_id("u1", "u2") == room_id("u2", "u1")
    True
    """
    return "-".join(sorted([str(user_a), str(user_b)]))


class RoomRouter:
    """
    Keyed store of room subscriptions.

    Owned by the application (``app.state.room_router``) and handed to the
    WebSocket endpoint; there is no module-level instance.

    Ordering: a connection's frames are written under its own lock, and
    each fan-out visits subscribers in join order, so events from one
    sender reach every subscriber in the order the router received them.
    """

    def __init__(self):
        # {room_id: {connection: None}} (dict keeps join order)
        self._rooms: Dict[str, Dict[Connection, None]] = {}
        # {connection: {room_id: None}}
        self._memberships: Dict[Connection, Dict[str, None]] = {}
        # Locks for ordered sending: {connection: asyncio.Lock}
        self._locks: Dict[Connection, asyncio.Lock] = {}

    def join_room(self, connection: Connection, self_id: Any, peer_id: Any) -> str:
        """
        Subscribe a connection to the room shared with a peer.

        Args:
            connection: Caller's WebSocket
            self_id: Caller's user id
            peer_id: Peer's user id

        Returns:
            Room id
        """
        room = room_id(self_id, peer_id)
        self._rooms.setdefault(room, {})[connection] = None
        self._memberships.setdefault(connection, {})[room] = None
        self._locks.setdefault(connection, asyncio.Lock())
        logger.info(f"User {self_id} joined room {room}")
        return room

    def disconnect(self, connection: Connection) -> None:
        """
        Drop every subscription of a connection.

        Args:
            connection: Closed WebSocket
        """
        rooms = self._memberships.pop(connection, {})
        for room in rooms:
            members = self._rooms.get(room)
            if members is None:
                continue
            members.pop(connection, None)
            if not members:
                del self._rooms[room]
        self._locks.pop(connection, None)
        if rooms:
            logger.info(f"Connection left {len(rooms)} room(s) on disconnect")

    def members(self, room: str) -> list[Connection]:
        """Connections subscribed to a room, in join order"""
        return list(self._rooms.get(room, {}))

    def rooms_of(self, connection: Connection) -> list[str]:
        return list(self._memberships.get(connection, {}))

    async def _deliver(self, connection: Connection, event: str, data: dict) -> bool:
        lock = self._locks.get(connection)
        if lock is None:
            return False
        async with lock:
            try:
                await connection.send_json({"event": event, "data": data})
                return True
            except Exception as e:
                logger.error(f"Failed to deliver '{event}': {e}")
        # Dead connection
        self.disconnect(connection)
        return False

    async def send_message(self, payload: dict) -> str:
        """
        Broadcast a chat message to its room, sender included.

        The room is derived from ``payload["senderId"]`` and
        ``payload["receiverId"]``. Messages are not persisted.

        Args:
            payload: Message dict

        Returns:
            Room id
        """
        room = room_id(payload.get("senderId"), payload.get("receiverId"))
        members = self.members(room)
        for connection in members:
            await self._deliver(connection, RealtimeEvent.RECEIVE_MESSAGE.value, payload)
        logger.debug(f"Message fanned out to {len(members)} connection(s) in room {room}")
        return room

    async def set_typing(
        self,
        connection: Connection,
        self_id: Any,
        peer_id: Any,
        is_typing: bool,
    ) -> str:
        """
        Notify the other subscribers of a room of a typing-state change.

        Args:
            connection: Caller's WebSocket (excluded from delivery)
            self_id: Caller's user id
            peer_id: Peer's user id
            is_typing: New typing state

        Returns:
            Room id
        """
        room = room_id(self_id, peer_id)
        data = {"userId": self_id, "isTyping": bool(is_typing)}
        for member in self.members(room):
            if member is connection:
                continue
            await self._deliver(member, RealtimeEvent.USER_TYPING.value, data)
        return room

    async def disconnect_all(self) -> None:
        """Forget every connection (application shutdown)"""
        count = len(self._memberships)
        self._rooms.clear()
        self._memberships.clear()
        self._locks.clear()
        logger.info(f"Room router cleared ({count} connection(s))")

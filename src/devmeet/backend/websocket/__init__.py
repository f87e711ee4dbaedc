"""Realtime chat routing"""
from .room_router import RoomRouter, room_id

__all__ = ["RoomRouter", "room_id"]

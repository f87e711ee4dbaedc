"""Data models"""
from .base import BaseModel
from .user import User, PendingSignup
from .connection_request import ConnectionRequest
from .alumni import Alumni

__all__ = [
    "BaseModel",
    "User",
    "PendingSignup",
    "ConnectionRequest",
    "Alumni",
]

"""API routes"""
from .auth import router as auth_router
from .profile import router as profile_router
from .feed import router as feed_router
from .match import router as match_router
from .request import router as request_router
from .websocket import router as websocket_router
from .alumni import router as alumni_router

__all__ = [
    "auth_router",
    "profile_router",
    "feed_router",
    "match_router",
    "request_router",
    "websocket_router",
    "alumni_router",
]

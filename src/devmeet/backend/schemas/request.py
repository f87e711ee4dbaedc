"""Connection request response models"""
from datetime import datetime
from pydantic import BaseModel
from .common import PublicUserResponse


class ConnectionRequestResponse(BaseModel):
    """Connection request data"""

    id: int
    from_user_id: int
    to_user_id: int
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RequestActionResponse(BaseModel):
    """Result of a send/review operation"""

    message: str
    data: ConnectionRequestResponse


class ReceivedRequestResponse(BaseModel):
    """Pending request together with its sender"""

    request: ConnectionRequestResponse
    sender: PublicUserResponse


class ConnectionListResponse(BaseModel):
    """Accepted peers of the viewer"""

    count: int
    connections: list[PublicUserResponse]

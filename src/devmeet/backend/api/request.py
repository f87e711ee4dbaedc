"""Connection request API endpoints"""
from fastapi import APIRouter
from .deps import SessionDep, CurrentUser
from ..schemas import (
    RequestActionResponse,
    ReceivedRequestResponse,
    ConnectionListResponse,
    MessageResponse,
)
from ..services import RequestService
from ..logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/request", tags=["Connection Requests"])


@router.post(
    "/send/{status}/{to_user_id}",
    response_model=RequestActionResponse,
    status_code=201,
)
async def send_request(
    status: str,
    to_user_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> RequestActionResponse:
    """Send a connection request

    - **status**: ``interested`` or ``ignored``
    - **to_user_id**: Receiver
    """
    logger.info(f"API: User {current_user.id} -> {to_user_id} ({status})")
    return await RequestService.send(session, current_user.id, to_user_id, status)


@router.post(
    "/review/{status}/{request_id}",
    response_model=RequestActionResponse,
)
async def review_request(
    status: str,
    request_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> RequestActionResponse:
    """Accept or reject a pending request addressed to the caller

    - **status**: ``accepted`` or ``rejected``
    """
    return await RequestService.review(session, current_user.id, request_id, status)


@router.delete(
    "/cancel/{to_user_id}",
    response_model=MessageResponse,
)
async def cancel_request(
    to_user_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> MessageResponse:
    """Delete the request between the caller and another account"""
    return await RequestService.cancel(session, current_user.id, to_user_id)


@router.get("/received", response_model=list[ReceivedRequestResponse])
async def received_requests(
    session: SessionDep,
    current_user: CurrentUser,
) -> list[ReceivedRequestResponse]:
    """Pending requests waiting for the caller's review"""
    return await RequestService.list_received(session, current_user.id)


@router.get("/connections", response_model=ConnectionListResponse)
async def connections(
    session: SessionDep,
    current_user: CurrentUser,
) -> ConnectionListResponse:
    """Accounts with an accepted request with the caller"""
    return await RequestService.list_connections(session, current_user.id)

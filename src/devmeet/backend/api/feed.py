"""Feed API endpoints"""
from fastapi import APIRouter
from .deps import SessionDep, CurrentUser
from ..schemas import FeedResponse, PublicUserResponse
from ..services import ProfileService

router = APIRouter(prefix="/feed", tags=["Feed"])


@router.get("", response_model=FeedResponse)
async def get_feed(session: SessionDep, current_user: CurrentUser) -> FeedResponse:
    """Accounts the caller has not interacted with yet"""
    return await ProfileService.get_feed(session, current_user)


@router.get("/user/{user_id}", response_model=PublicUserResponse)
async def get_user(
    user_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> PublicUserResponse:
    """Public profile of one account"""
    return await ProfileService.get_user(session, user_id)

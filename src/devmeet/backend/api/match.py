"""Skill matching API endpoints"""
from fastapi import APIRouter
from .deps import SessionDep, CurrentUser
from ..schemas import MatchListResponse, MatchResponse
from ..services import MatchService
from ..logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get(
    "",
    response_model=MatchListResponse,
    summary="Ranked skill matches",
)
async def list_matches(
    session: SessionDep,
    current_user: CurrentUser,
) -> MatchListResponse:
    """Peers ranked by complementary skills

    A peer matches when they teach something the caller wants to learn
    or want to learn something the caller teaches. Peers already in a
    connection request with the caller are left out.
    """
    logger.info(f"API: Listing matches for user {current_user.id}")
    return await MatchService.list_matches(session, current_user)


@router.get(
    "/{user_id}",
    response_model=MatchResponse,
    summary="Match details with one peer",
)
async def get_match(
    user_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> MatchResponse:
    """Overlap between the caller and one peer"""
    return await MatchService.get_match(session, current_user, user_id)

"""Profile API endpoints"""
from fastapi import APIRouter
from .deps import SessionDep, CurrentUser
from ..schemas import (
    UserResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ChangePasswordRequest,
    MessageResponse,
)
from ..services import AuthService, ProfileService
from ..logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/view", response_model=UserResponse)
async def view_profile(current_user: CurrentUser) -> UserResponse:
    """Own profile"""
    return UserResponse.model_validate(current_user)


@router.patch("/edit", response_model=ProfileUpdateResponse)
async def edit_profile(
    request: ProfileUpdateRequest,
    session: SessionDep,
    current_user: CurrentUser,
) -> ProfileUpdateResponse:
    """Update profile fields

    Only the fields present in the body are changed. Email and password
    are not editable here; skill lists are normalised.
    """
    logger.info(f"API: Editing profile of user {current_user.id}")
    return await ProfileService.update_profile(session, current_user, request)


@router.patch("/password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    session: SessionDep,
    current_user: CurrentUser,
) -> MessageResponse:
    """Change password

    - **current_password**: Current password
    - **new_password**: New password (at least 6 characters)
    """
    logger.info(f"API: Changing password of user {current_user.id}")
    return await AuthService.change_password(session, current_user, request)

"""Dependency injection"""
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from ..database import get_session
from ..auth import get_user_from_token
from ..models import User
from ..utils.email import EmailService
from ..exceptions import AuthorizationError
from ..logger import get_logger

logger = get_logger(__name__)

# HTTP Bearer authentication scheme
security = HTTPBearer()

# Database session dependency
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    session: SessionDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials,
        Depends(security),
    ],
) -> User:
    """Get current authenticated user

    Args:
        session: Database session
        credentials: HTTP authentication credentials

    Returns:
        Current user

    Raises:
        AuthenticationError: Token invalid, account gone or unverified
    """
    return await get_user_from_token(credentials.credentials, session)


def get_notifier(request: Request) -> EmailService:
    """Notification sender owned by the application"""
    return request.app.state.notifier


# Current user dependency
CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(current_user: CurrentUser) -> User:
    """Current user, provided it holds administrator rights

    Raises:
        AuthorizationError: Caller is not an admin
    """
    if not current_user.is_admin:
        logger.warning(f"Admin access denied for user {current_user.id}")
        raise AuthorizationError("Access denied. Admin privileges required.")
    return current_user


AdminUser = Annotated[User, Depends(require_admin)]

NotifierDep = Annotated[EmailService, Depends(get_notifier)]

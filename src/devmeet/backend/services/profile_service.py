"""Profile and feed service"""
from sqlmodel import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from ..models import User, ConnectionRequest
from ..schemas.auth import UserResponse
from ..schemas.common import PublicUserResponse
from ..schemas.profile import ProfileUpdateRequest, ProfileUpdateResponse, FeedResponse
from ..utils.query import get_active_query
from ..exceptions import NotFoundError
from ..logger import get_logger

logger = get_logger(__name__)


class ProfileService:
    """Profile and feed service"""

    @staticmethod
    async def update_profile(
        session: AsyncSession,
        user: User,
        request: ProfileUpdateRequest,
    ) -> ProfileUpdateResponse:
        """Update the fields present in the request

        Args:
            session: Database session
            user: Current user
            request: Partial profile update

        Returns:
            ProfileUpdateResponse
        """
        changes = request.model_dump(exclude_unset=True)
        logger.info(f"Updating profile for user {user.id}: {sorted(changes)}")

        for name, value in changes.items():
            if name in ("firstname", "lastname") and value is None:
                continue
            if name == "year" and value is not None:
                value = request.year.value
            elif name == "social_links":
                value = request.social_links.model_dump(exclude_none=True) if request.social_links else {}
            elif name in ("skills", "wants_to_learn", "can_teach") and value is None:
                value = []
            elif name == "photo_url" and value is None:
                value = ""
            setattr(user, name, value)

        user.touch()
        session.add(user)
        await session.commit()
        await session.refresh(user)

        logger.info(f"Profile updated successfully for user {user.id}")
        return ProfileUpdateResponse(
            message=f"{user.firstname}, your profile updated successfully!",
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    async def get_feed(session: AsyncSession, viewer: User) -> FeedResponse:
        """Accounts the viewer has no connection request with yet"""
        result = await session.execute(
            select(ConnectionRequest).where(
                or_(
                    ConnectionRequest.from_user_id == viewer.id,
                    ConnectionRequest.to_user_id == viewer.id,
                )
            )
        )
        excluded = {request.counterpart_of(viewer.id) for request in result.scalars().all()}
        excluded.add(viewer.id)

        users_result = await session.execute(
            get_active_query(User)
            .where(User.is_email_verified == True)  # noqa: E712
            .where(User.id.not_in(excluded))
            .order_by(User.id)
        )
        users = [PublicUserResponse.model_validate(u) for u in users_result.scalars().all()]
        logger.info(f"Feed for user {viewer.id}: {len(users)} users")
        return FeedResponse(users=users, total_users=len(users))

    @staticmethod
    async def get_user(session: AsyncSession, user_id: int) -> PublicUserResponse:
        """Public data of one account

        Raises:
            NotFoundError: No live account with that id
        """
        result = await session.execute(
            get_active_query(User).where(User.id == user_id)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return PublicUserResponse.model_validate(user)

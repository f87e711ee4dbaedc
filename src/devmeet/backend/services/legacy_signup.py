"""Compatibility adapter for the single-phase signup design

Older clients created an unverified ``User`` row directly and verified it in
place. Those rows are still around, so the two-phase flow in
``AuthService`` consults this adapter only when no ``PendingSignup`` covers
an email. Nothing else in the code base touches the legacy passcode columns.
"""
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import settings
from ..models import User
from ..auth import generate_passcode, secrets_match
from ..utils.query import get_active_query
from ..exceptions import (
    NotFoundError,
    AlreadyVerifiedError,
    ExpiredError,
    InvalidCodeError,
)
from ..logger import get_logger

logger = get_logger(__name__)


class LegacySignupAdapter:
    """Reconciliation and passcode refresh for legacy unverified accounts"""

    @staticmethod
    async def find_account(session: AsyncSession, email: str) -> User | None:
        """Find the live account registered under an email"""
        result = await session.execute(
            get_active_query(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def reconcile(session: AsyncSession, user: User) -> None:
        """Retire an unverified legacy account

        The row is soft-deleted so a fresh pending signup (and later a
        verified account) can take over the email. Changes are flushed but
        not committed; the caller owns the transaction.
        """
        if user.is_email_verified:
            return
        logger.info(
            f"Reconciling legacy unverified account {user.id} for {user.email}"
        )
        user.soft_delete()
        session.add(user)
        await session.flush()

    @staticmethod
    async def resend(session: AsyncSession, email: str) -> tuple[User, str, datetime]:
        """Refresh the passcode stored on a legacy unverified account

        Args:
            session: Database session
            email: Account email

        Returns:
            (account, passcode, expiry)

        Raises:
            NotFoundError: No account for the email
            AlreadyVerifiedError: Account already verified
        """
        user = await LegacySignupAdapter.find_account(session, email)
        if not user:
            logger.warning(f"No pending signup or legacy account for {email}")
            raise NotFoundError("Pending signup not found. Please sign up again.")

        if user.is_email_verified:
            logger.warning(f"Resend requested for verified account {email}")
            raise AlreadyVerifiedError()

        code = generate_passcode()
        expires_at = datetime.now() + timedelta(minutes=settings.otp_expire_minutes)
        user.email_verification_otp = code
        user.otp_expiry = expires_at
        user.touch()
        session.add(user)
        await session.commit()

        logger.info(f"Legacy passcode refreshed for account {user.id}")
        return user, code, expires_at

    @staticmethod
    async def verify(session: AsyncSession, email: str, code: str) -> User | None:
        """Verify a legacy unverified account in place

        Args:
            session: Database session
            email: Account email
            code: Passcode supplied by the user

        Returns:
            The verified account, or None when no unverified legacy account
            exists for the email

        Raises:
            ExpiredError: Legacy passcode expired
            InvalidCodeError: Passcode mismatch
        """
        user = await LegacySignupAdapter.find_account(session, email)
        if not user or user.is_email_verified or not user.email_verification_otp:
            return None

        if not user.otp_expiry or datetime.now() > user.otp_expiry:
            logger.warning(f"Expired legacy passcode for account {user.id}")
            raise ExpiredError()

        if not secrets_match(user.email_verification_otp, code.strip()):
            logger.warning(f"Invalid legacy passcode for account {user.id}")
            raise InvalidCodeError()

        user.is_email_verified = True
        user.email_verification_otp = None
        user.otp_expiry = None
        user.touch()
        session.add(user)
        await session.commit()
        await session.refresh(user)

        logger.info(f"Legacy account {user.id} verified")
        return user

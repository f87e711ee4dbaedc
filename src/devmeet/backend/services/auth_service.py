"""Account provisioning service

Two-phase signup: a ``PendingSignup`` holds the profile and a one-time
passcode until the email owner proves control of the inbox; only then is
the permanent ``User`` created. Password login, reset and admin promotion
live here as well.
"""
from datetime import datetime, timedelta
from sqlmodel import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import settings
from ..models import User, PendingSignup
from ..schemas.auth import (
    SignupRequest,
    SignupResponse,
    LoginRequest,
    LoginResponse,
    UserResponse,
    ForgotPasswordResponse,
)
from ..schemas.common import MessageResponse
from ..schemas.profile import ChangePasswordRequest
from ..auth import (
    verify_password,
    get_password_hash,
    create_access_token,
    generate_passcode,
    generate_reset_token,
    secrets_match,
)
from ..utils.email import EmailService
from ..utils.query import get_active_query
from ..exceptions import (
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ExpiredError,
    InvalidCodeError,
    AlreadyVerifiedError,
    InvalidOrExpiredTokenError,
    UpstreamUnavailableError,
)
from ..logger import get_logger
from .legacy_signup import LegacySignupAdapter

logger = get_logger(__name__)

# Profile columns copied from a pending signup onto the new account
PROFILE_COLUMNS = (
    "firstname",
    "lastname",
    "email",
    "hashed_password",
    "address",
    "age",
    "gender",
    "about",
    "bio",
    "wants_to_learn",
    "can_teach",
    "skills",
    "college",
    "year",
    "social_links",
    "photo_url",
)


class AuthService:
    """Authentication service"""

    @staticmethod
    def _new_passcode() -> tuple[str, datetime]:
        """Generate a passcode and its absolute expiry"""
        code = generate_passcode()
        expires_at = datetime.now() + timedelta(minutes=settings.otp_expire_minutes)
        return code, expires_at

    @staticmethod
    async def _get_account(session: AsyncSession, email: str) -> User | None:
        """Find the live account registered under an email"""
        result = await session.execute(
            get_active_query(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _get_pending(session: AsyncSession, email: str) -> PendingSignup | None:
        result = await session.execute(
            select(PendingSignup).where(PendingSignup.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _refresh_pending(
        session: AsyncSession,
        pending: PendingSignup,
    ) -> tuple[str, datetime]:
        """Regenerate passcode and expiry of a pending signup in place"""
        code, expires_at = AuthService._new_passcode()
        pending.email_verification_otp = code
        pending.otp_expiry = expires_at
        pending.touch()
        session.add(pending)
        await session.commit()
        return code, expires_at

    @staticmethod
    async def _deliver_passcode(
        session: AsyncSession,
        notifier: EmailService,
        email: str,
        code: str,
        expires_at: datetime,
        name: str | None,
        message: str,
        rollback: PendingSignup | None = None,
    ) -> SignupResponse:
        """Send the passcode, degrading to an inline passcode in development

        Args:
            rollback: Newly created pending signup to delete when delivery
                fails in production

        Raises:
            UpstreamUnavailableError: Delivery failed in production
        """
        try:
            await notifier.send_passcode(email, code, name)
        except UpstreamUnavailableError:
            if settings.is_production:
                logger.error(f"Passcode delivery to {email} failed")
                if rollback is not None:
                    await session.delete(rollback)
                    await session.commit()
                    logger.info(f"Rolled back pending signup for {email}")
                raise
            logger.warning(
                f"Passcode delivery to {email} failed, returning it inline "
                f"(development mode)"
            )
            return SignupResponse(
                message="OTP generated (email service unavailable). Verify to complete signup.",
                dev_mode=True,
                otp=code,
                expires_at=expires_at,
            )

        logger.info(f"Passcode sent to {email}")
        return SignupResponse(message=message, expires_at=expires_at)

    @staticmethod
    async def begin_signup(
        session: AsyncSession,
        request: SignupRequest,
        notifier: EmailService,
    ) -> tuple[SignupResponse, bool]:
        """Start a signup: create or refresh the pending record

        Args:
            session: Database session
            request: Validated signup request
            notifier: Notification sender

        Returns:
            (response, created) where ``created`` is False when an existing
            pending signup was refreshed

        Raises:
            ConflictError: Email already registered and verified
            UpstreamUnavailableError: Passcode delivery failed in production
        """
        email = request.email
        logger.info(f"Processing signup for {email}")

        # 1. Verified accounts own their email; legacy unverified ones are retired
        existing_user = await AuthService._get_account(session, email)
        if existing_user:
            if existing_user.is_email_verified:
                logger.warning(f"Email already registered: {email}")
                raise ConflictError("Email already registered and verified")
            await LegacySignupAdapter.reconcile(session, existing_user)

        # 2. Refresh an existing pending signup instead of duplicating it
        pending = await AuthService._get_pending(session, email)
        if pending:
            code, expires_at = await AuthService._refresh_pending(session, pending)
            response = await AuthService._deliver_passcode(
                session,
                notifier,
                email,
                code,
                expires_at,
                pending.firstname or request.firstname,
                "OTP resent to your email",
            )
            return response, False

        # 3. Create the pending signup
        code, expires_at = AuthService._new_passcode()
        pending = PendingSignup(
            firstname=request.firstname,
            lastname=request.lastname,
            email=email,
            hashed_password=get_password_hash(request.password),
            address=request.address,
            age=request.age,
            gender=request.gender,
            about=request.about,
            bio=request.bio,
            skills=request.skills,
            wants_to_learn=request.wants_to_learn,
            can_teach=request.can_teach,
            college=request.college.strip() if request.college else None,
            year=request.year.value if request.year else None,
            social_links=request.social_links.model_dump(exclude_none=True),
            photo_url=request.photo_url,
            email_verification_otp=code,
            otp_expiry=expires_at,
        )
        session.add(pending)
        try:
            await session.commit()
        except IntegrityError:
            # A concurrent signup for the same email won the insert
            await session.rollback()
            logger.info(f"Concurrent signup for {email}, refreshing existing record")
            pending = await AuthService._get_pending(session, email)
            if pending is None:
                raise ConflictError("Signup already in progress, please retry")
            code, expires_at = await AuthService._refresh_pending(session, pending)
            response = await AuthService._deliver_passcode(
                session,
                notifier,
                email,
                code,
                expires_at,
                pending.firstname,
                "OTP resent to your email",
            )
            return response, False

        await session.refresh(pending)
        logger.debug(f"Pending signup {pending.id} created for {email}, expires at {expires_at}")

        response = await AuthService._deliver_passcode(
            session,
            notifier,
            email,
            code,
            expires_at,
            request.firstname,
            "OTP sent. Please verify your email to complete signup.",
            rollback=pending,
        )
        return response, True

    @staticmethod
    async def verify_passcode(
        session: AsyncSession,
        email: str,
        code: str,
        notifier: EmailService,
    ) -> User:
        """Promote a pending signup to a verified account

        Args:
            session: Database session
            email: Signup email
            code: Passcode supplied by the user
            notifier: Notification sender (welcome email)

        Returns:
            The created account

        Raises:
            NotFoundError: No pending signup for the email
            ExpiredError: Passcode expired
            InvalidCodeError: Passcode mismatch
            AlreadyVerifiedError: A verified account already owns the email
        """
        logger.info(f"Verifying passcode for {email}")

        pending = await AuthService._get_pending(session, email)
        if not pending:
            legacy_user = await LegacySignupAdapter.verify(session, email, code)
            if legacy_user is None:
                logger.warning(f"No pending signup for {email}")
                raise NotFoundError("Pending signup not found. Please sign up again.")
            return legacy_user

        # Eviction is not instantaneous, so expiry is checked here as well
        if datetime.now() > pending.otp_expiry:
            logger.warning(f"Expired passcode for {email}")
            raise ExpiredError()

        if not secrets_match(pending.email_verification_otp, code.strip()):
            logger.warning(f"Invalid passcode for {email}")
            raise InvalidCodeError()

        existing_user = await AuthService._get_account(session, email)
        if existing_user:
            if existing_user.is_email_verified:
                await session.delete(pending)
                await session.commit()
                logger.warning(f"Email already verified: {email}")
                raise AlreadyVerifiedError()
            await LegacySignupAdapter.reconcile(session, existing_user)

        user = User(
            **{column: getattr(pending, column) for column in PROFILE_COLUMNS},
            is_email_verified=True,
        )
        session.add(user)
        await session.delete(pending)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(f"Concurrent verification for {email}")
            raise AlreadyVerifiedError()
        await session.refresh(user)

        logger.info(f"Account {user.id} created for {email}")

        try:
            await notifier.send_welcome(email, user.firstname)
        except Exception as e:
            # Welcome email is best-effort
            logger.warning(f"Welcome email to {email} failed: {e}")

        return user

    @staticmethod
    async def resend_passcode(
        session: AsyncSession,
        email: str,
        notifier: EmailService,
    ) -> SignupResponse:
        """Issue a fresh passcode for a pending (or legacy) signup

        Raises:
            NotFoundError: Neither a pending signup nor an account exists
            AlreadyVerifiedError: Account already verified
            UpstreamUnavailableError: Delivery failed in production
        """
        logger.info(f"Resending passcode to {email}")

        pending = await AuthService._get_pending(session, email)
        if pending:
            code, expires_at = await AuthService._refresh_pending(session, pending)
            name = pending.firstname
        else:
            user, code, expires_at = await LegacySignupAdapter.resend(session, email)
            name = user.firstname

        return await AuthService._deliver_passcode(
            session,
            notifier,
            email,
            code,
            expires_at,
            name,
            "OTP resent successfully",
        )

    @staticmethod
    async def login(
        session: AsyncSession,
        request: LoginRequest,
    ) -> LoginResponse:
        """User login

        Raises:
            AuthenticationError: Unknown email or wrong password
            ValidationError: Email not verified
        """
        logger.info(f"Login attempt for: {request.email}")

        user = await AuthService._get_account(session, request.email)
        if not user:
            logger.warning(f"User not found: {request.email}")
            raise AuthenticationError("Account not found")

        if not user.is_email_verified:
            logger.warning(f"Account not verified: {request.email}")
            raise ValidationError("Email not verified, please verify your email first")

        if not verify_password(request.password, user.hashed_password):
            logger.warning(f"Invalid password for user: {request.email}")
            raise AuthenticationError("Password is incorrect")

        access_token = create_access_token(data={"sub": str(user.id)})

        logger.info(f"User logged in successfully: {user.email} (ID: {user.id})")

        return LoginResponse(
            access_token=access_token,
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    async def request_password_reset(
        session: AsyncSession,
        email: str,
        notifier: EmailService,
    ) -> ForgotPasswordResponse:
        """Issue a password reset token

        Unknown emails get the same answer as real ones.

        Raises:
            ValidationError: Account not verified
            UpstreamUnavailableError: Delivery failed in production
        """
        logger.info(f"Password reset requested for {email}")
        generic = ForgotPasswordResponse(
            message="If an account exists with this email, you will receive a password reset link shortly."
        )

        user = await AuthService._get_account(session, email)
        if not user:
            logger.info(f"Password reset for unknown email {email}")
            return generic

        if not user.is_email_verified:
            raise ValidationError("Please verify your email before resetting password")

        token = generate_reset_token()
        user.reset_password_token = token
        user.reset_password_expiry = datetime.now() + timedelta(
            minutes=settings.reset_token_expire_minutes
        )
        user.touch()
        session.add(user)
        await session.commit()

        try:
            await notifier.send_password_reset(email, token, user.firstname)
        except UpstreamUnavailableError:
            if settings.is_production:
                # The emailed link never arrived, so the token must not stay usable
                user.reset_password_token = None
                user.reset_password_expiry = None
                session.add(user)
                await session.commit()
                logger.error(f"Password reset delivery to {email} failed")
                raise
            logger.warning(
                f"Password reset delivery to {email} failed, returning token inline "
                f"(development mode)"
            )
            return ForgotPasswordResponse(
                message="Password reset token generated (email service unavailable)",
                dev_mode=True,
                reset_token=token,
                reset_url=notifier.reset_url(token),
            )

        logger.info(f"Password reset link sent to {email}")
        return generic

    @staticmethod
    async def complete_password_reset(
        session: AsyncSession,
        token: str,
        new_password: str,
    ) -> MessageResponse:
        """Set a new password using a reset token

        The token is invalidated after use, whether or not the password
        update succeeds.

        Raises:
            InvalidOrExpiredTokenError: Unknown or expired token
        """
        result = await session.execute(
            get_active_query(User).where(User.reset_password_token == token)
        )
        user = result.scalar_one_or_none()

        if not user:
            logger.warning("Password reset with unknown token")
            raise InvalidOrExpiredTokenError()

        if not user.reset_password_expiry or user.reset_password_expiry < datetime.now():
            logger.warning(f"Expired password reset token for user {user.id}")
            user.reset_password_token = None
            user.reset_password_expiry = None
            session.add(user)
            await session.commit()
            raise InvalidOrExpiredTokenError()

        try:
            user.hashed_password = get_password_hash(new_password)
        finally:
            user.reset_password_token = None
            user.reset_password_expiry = None
            user.touch()
            session.add(user)
            await session.commit()

        logger.info(f"Password reset completed for user {user.id}")
        return MessageResponse(
            message="Password has been reset successfully. You can now login with your new password."
        )

    @staticmethod
    async def change_password(
        session: AsyncSession,
        user: User,
        request: ChangePasswordRequest,
    ) -> MessageResponse:
        """Change user password

        Raises:
            AuthenticationError: Current password is incorrect
        """
        logger.info(f"Changing password for user: {user.id}")

        if not verify_password(request.current_password, user.hashed_password):
            logger.warning(f"Incorrect current password for user: {user.id}")
            raise AuthenticationError("Current password is incorrect")

        user.hashed_password = get_password_hash(request.new_password)
        user.touch()
        session.add(user)
        await session.commit()

        logger.info(f"Password changed successfully for user: {user.id}")
        return MessageResponse(message="Password updated successfully")

    @staticmethod
    async def create_admin(
        session: AsyncSession,
        email: str,
        admin_secret: str | None = None,
    ) -> MessageResponse:
        """Promote an account to administrator

        Args:
            admin_secret: Must match ``settings.admin_secret``; ``None``
                skips the check (trusted local CLI)

        Raises:
            AuthorizationError: Secret missing or wrong
            NotFoundError: No account for the email
            ConflictError: Account is already an admin
        """
        if admin_secret is not None:
            if not settings.admin_secret or not secrets_match(
                settings.admin_secret, admin_secret
            ):
                logger.warning(f"Invalid admin secret for {email}")
                raise AuthorizationError("Invalid admin secret")

        user = await AuthService._get_account(session, email)
        if not user:
            raise NotFoundError("User not found")

        if user.is_admin:
            raise ConflictError("User is already an admin")

        user.is_admin = True
        user.touch()
        session.add(user)
        await session.commit()

        logger.info(f"User {user.id} promoted to admin")
        return MessageResponse(message=f"{user.full_name} is now an admin")

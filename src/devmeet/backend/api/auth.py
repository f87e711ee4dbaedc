"""Authentication-related API endpoints"""
from fastapi import APIRouter, Response, status
from .deps import SessionDep, CurrentUser, NotifierDep
from ..auth import create_access_token
from ..schemas import (
    SignupRequest,
    SignupResponse,
    EmailRequest,
    VerifyOtpRequest,
    LoginRequest,
    LoginResponse,
    UserResponse,
    ForgotPasswordResponse,
    ResetPasswordRequest,
    CreateAdminRequest,
    MessageResponse,
)
from ..services import AuthService
from ..logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start signup",
)
async def signup(
    request: SignupRequest,
    response: Response,
    session: SessionDep,
    notifier: NotifierDep,
) -> SignupResponse:
    """Start a two-phase signup

    Stores the profile as a pending signup and emails a one-time passcode.
    Nothing becomes a real account until ``/auth/verify-otp`` succeeds.
    Answers 200 instead of 201 when an existing pending signup was
    refreshed.

    - **firstname**, **lastname**: Required
    - **email**: Email address
    - **password**: At least 8 characters with upper, lower, digit and symbol
    """
    logger.info(f"API: Signup for {request.email}")
    result, created = await AuthService.begin_signup(session, request, notifier)
    if not created:
        response.status_code = status.HTTP_200_OK
    return result


@router.post(
    "/verify-otp",
    response_model=LoginResponse,
    summary="Verify signup passcode",
)
async def verify_otp(
    request: VerifyOtpRequest,
    session: SessionDep,
    notifier: NotifierDep,
) -> LoginResponse:
    """Verify the emailed passcode and create the account

    - **email**: Signup email
    - **otp**: Passcode from the email
    """
    logger.info(f"API: Verifying passcode for {request.email}")
    user = await AuthService.verify_passcode(session, request.email, request.otp, notifier)
    return LoginResponse(
        message="Email verified successfully",
        access_token=create_access_token(data={"sub": str(user.id)}),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/resend-otp",
    response_model=SignupResponse,
    summary="Resend signup passcode",
)
async def resend_otp(
    request: EmailRequest,
    session: SessionDep,
    notifier: NotifierDep,
) -> SignupResponse:
    """Issue a fresh passcode for a pending signup"""
    logger.info(f"API: Resending passcode to {request.email}")
    return await AuthService.resend_passcode(session, request.email, notifier)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User login",
)
async def login(
    request: LoginRequest,
    session: SessionDep,
) -> LoginResponse:
    """User login

    Login with email and password, returns a JWT access token.

    - **email**: Email address
    - **password**: Password
    """
    logger.info(f"API: Login attempt for {request.email}")
    return await AuthService.login(session, request)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="User logout",
)
async def logout() -> MessageResponse:
    """User logout

    Tokens are stateless; the client discards its copy.
    """
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user info",
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get current user info

    Requires a valid JWT token in the Authorization header.
    """
    logger.info(f"API: Getting user info for {current_user.email}")
    return UserResponse.model_validate(current_user)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    summary="Request password reset",
)
async def forgot_password(
    request: EmailRequest,
    session: SessionDep,
    notifier: NotifierDep,
) -> ForgotPasswordResponse:
    """Email a password reset link

    The answer does not reveal whether the email is registered.
    """
    logger.info(f"API: Password reset requested for {request.email}")
    return await AuthService.request_password_reset(session, request.email, notifier)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
)
async def reset_password(
    request: ResetPasswordRequest,
    session: SessionDep,
) -> MessageResponse:
    """Set a new password with a reset token

    - **token**: Token from the reset email
    - **new_password**: At least 6 characters
    """
    logger.info("API: Completing password reset")
    return await AuthService.complete_password_reset(
        session, request.token, request.new_password
    )


@router.post(
    "/create-admin",
    response_model=MessageResponse,
    summary="Promote account to admin",
)
async def create_admin(
    request: CreateAdminRequest,
    session: SessionDep,
) -> MessageResponse:
    """Promote an account to administrator

    - **email**: Account to promote
    - **admin_secret**: Server admin secret
    """
    logger.info(f"API: Admin promotion requested for {request.email}")
    return await AuthService.create_admin(session, request.email, request.admin_secret)

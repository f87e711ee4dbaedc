"""API request/response models"""
from .common import MessageResponse, PublicUserResponse, SocialLinks
from .auth import (
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
)
from .profile import (
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ChangePasswordRequest,
    FeedResponse,
)
from .match import MatchDetails, MatchResponse, MatchListResponse
from .request import (
    ConnectionRequestResponse,
    RequestActionResponse,
    ReceivedRequestResponse,
    ConnectionListResponse,
)
from .alumni import (
    AlumniCreateRequest,
    AlumniUpdateRequest,
    AlumniResponse,
    AlumniActionResponse,
    AlumniListResponse,
    AlumniStatsResponse,
)

__all__ = [
    "MessageResponse",
    "PublicUserResponse",
    "SocialLinks",
    "SignupRequest",
    "SignupResponse",
    "EmailRequest",
    "VerifyOtpRequest",
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "ForgotPasswordResponse",
    "ResetPasswordRequest",
    "CreateAdminRequest",
    "ProfileUpdateRequest",
    "ProfileUpdateResponse",
    "ChangePasswordRequest",
    "FeedResponse",
    "MatchDetails",
    "MatchResponse",
    "MatchListResponse",
    "ConnectionRequestResponse",
    "RequestActionResponse",
    "ReceivedRequestResponse",
    "ConnectionListResponse",
    "AlumniCreateRequest",
    "AlumniUpdateRequest",
    "AlumniResponse",
    "AlumniActionResponse",
    "AlumniListResponse",
    "AlumniStatsResponse",
]

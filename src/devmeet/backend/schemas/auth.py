"""Authentication-related request/response models"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from ..enums import CollegeYear
from .common import (
    SocialLinks,
    PublicUserResponse,
    clean_skill_list,
    missing_password_requirements,
)


class SignupRequest(BaseModel):
    """Signup request: identity and profile of the pending account"""

    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., max_length=128)
    address: str | None = Field(default=None, max_length=255)
    age: int | None = Field(default=None, ge=0, le=150)
    gender: str | None = Field(default=None, max_length=50)
    about: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    skills: list[str] = Field(default_factory=list)
    wants_to_learn: list[str] = Field(default_factory=list)
    can_teach: list[str] = Field(default_factory=list)
    college: str | None = Field(default=None, max_length=255)
    year: CollegeYear | None = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    photo_url: str = Field(default="", max_length=512)

    @field_validator("firstname", "lastname")
    @classmethod
    def strip_names(cls, v: str) -> str:
        """Names must not be blank"""
        v = v.strip()
        if not v:
            raise ValueError("First name and last name are required.")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        """Password must include upper, lower, digit and symbol"""
        missing = missing_password_requirements(v)
        if missing:
            raise ValueError(
                "Password must be strong, missing: " + ", ".join(missing)
            )
        return v

    @field_validator("skills", "wants_to_learn", "can_teach", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        return clean_skill_list(v)


class SignupResponse(BaseModel):
    """Signup / resend response

    ``otp`` is only populated in development mode when delivery failed.
    """

    success: bool = True
    message: str
    requires_verification: bool = True
    dev_mode: bool = False
    otp: str | None = None
    expires_at: datetime | None = None


class EmailRequest(BaseModel):
    """Request carrying only an email address"""

    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class VerifyOtpRequest(EmailRequest):
    """Passcode verification request"""

    otp: str = Field(..., min_length=1, max_length=10)


class LoginRequest(EmailRequest):
    """Login request"""

    password: str = Field(..., min_length=1)


class UserResponse(PublicUserResponse):
    """Own account information"""

    is_email_verified: bool
    is_admin: bool
    created_at: datetime


class LoginResponse(BaseModel):
    """Login response"""

    success: bool = True
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ForgotPasswordResponse(BaseModel):
    """Password reset request response

    ``reset_token``/``reset_url`` are only populated in development mode
    when delivery failed.
    """

    success: bool = True
    message: str
    dev_mode: bool = False
    reset_token: str | None = None
    reset_url: str | None = None


class ResetPasswordRequest(BaseModel):
    """Complete password reset request"""

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class CreateAdminRequest(EmailRequest):
    """Promote an account to administrator"""

    admin_secret: str

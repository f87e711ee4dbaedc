"""Account-related data models"""
from datetime import datetime
from sqlmodel import Field, Index, JSON
from sqlalchemy import text
from .base import BaseModel


class ProfileFields(BaseModel):
    """Profile columns shared by pending signups and accounts"""

    firstname: str = Field(max_length=100)
    lastname: str = Field(max_length=100)
    email: str = Field(max_length=255)
    hashed_password: str = Field(max_length=255)

    address: str | None = Field(default=None, max_length=255)
    age: int | None = Field(default=None)
    gender: str | None = Field(default=None, max_length=50)
    about: str | None = Field(default=None)
    bio: str | None = Field(default=None, max_length=500)

    # Learning & teaching (display strings, compared by normalized key)
    wants_to_learn: list[str] = Field(default_factory=list, sa_type=JSON)
    can_teach: list[str] = Field(default_factory=list, sa_type=JSON)
    skills: list[str] = Field(default_factory=list, sa_type=JSON)

    # Education
    college: str | None = Field(default=None, max_length=255)
    year: str | None = Field(default=None, max_length=20)

    social_links: dict = Field(default_factory=dict, sa_type=JSON)
    photo_url: str = Field(default="", max_length=512)


class PendingSignup(ProfileFields, table=True):
    """Unverified signup awaiting passcode confirmation

    Exactly one row per email. Rows past ``otp_expiry`` are evicted by the
    background reaper and rejected by verification.
    """

    __tablename__ = "pending_signups"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=255)

    # OTP verification
    email_verification_otp: str = Field(max_length=10)
    otp_expiry: datetime = Field(nullable=False, index=True)


class User(ProfileFields, table=True):
    """Account table"""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, max_length=255)

    # Email verification
    is_email_verified: bool = Field(default=False)
    # Legacy single-phase signup columns, see services.legacy_signup
    email_verification_otp: str | None = Field(default=None, max_length=10)
    otp_expiry: datetime | None = Field(default=None)

    # Password reset
    reset_password_token: str | None = Field(default=None, max_length=128, index=True)
    reset_password_expiry: datetime | None = Field(default=None)

    is_admin: bool = Field(default=False)

    __table_args__ = (
        # Partial unique index: only enforce uniqueness for non-deleted records
        Index(
            "idx_active_users_email_unique",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

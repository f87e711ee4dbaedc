"""Profile request models"""
from pydantic import BaseModel, Field, field_validator
from ..enums import CollegeYear
from .common import SocialLinks, PublicUserResponse, clean_skill_list
from .auth import UserResponse


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; unset fields are left untouched"""

    firstname: str | None = Field(default=None, min_length=1, max_length=100)
    lastname: str | None = Field(default=None, min_length=1, max_length=100)
    age: int | None = Field(default=None, ge=0, le=150)
    gender: str | None = Field(default=None, max_length=50)
    about: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    skills: list[str] | None = None
    wants_to_learn: list[str] | None = None
    can_teach: list[str] | None = None
    college: str | None = Field(default=None, max_length=255)
    year: CollegeYear | None = None
    social_links: SocialLinks | None = None
    photo_url: str | None = Field(default=None, max_length=512)

    model_config = {"extra": "forbid"}

    @field_validator("skills", "wants_to_learn", "can_teach", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        if v is None:
            return None
        return clean_skill_list(v)


class ProfileUpdateResponse(BaseModel):
    """Profile update response"""

    success: bool = True
    message: str
    user: UserResponse


class ChangePasswordRequest(BaseModel):
    """Change password request"""

    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


class FeedResponse(BaseModel):
    """Feed of accounts the viewer has no relationship with yet"""

    message: str = "Feed data retrieved successfully"
    users: list[PublicUserResponse]
    total_users: int

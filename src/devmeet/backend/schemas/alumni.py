"""Alumni directory request/response models"""
from typing import Literal
from pydantic import BaseModel, EmailStr, Field, field_validator
from .common import SocialLinks


class InterviewProcess(BaseModel):
    """How the graduate's hiring process went"""

    rounds: int | None = Field(default=None, ge=0)
    description: str | None = None
    tips: list[str] = Field(default_factory=list)
    difficulty: Literal["Easy", "Medium", "Hard", ""] = ""


class AlumniFields(BaseModel):
    """Validators shared by create and update payloads"""

    @field_validator("email", check_fields=False)
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @field_validator(
        "name", "college_name", "current_company", "current_role",
        check_fields=False,
    )
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("expertise", check_fields=False)
    @classmethod
    def clean_expertise(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [item.strip() for item in v if item and item.strip()]


class AlumniCreateRequest(AlumniFields):
    """New directory entry"""

    name: str = Field(..., max_length=200)
    email: EmailStr
    college_name: str = Field(..., max_length=255)
    graduation_year: str = Field(..., min_length=1, max_length=10)
    degree: str | None = Field(default=None, max_length=100)
    current_company: str = Field(..., max_length=200)
    current_role: str = Field(..., max_length=200)
    location: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=500)
    expertise: list[str] = Field(default_factory=list)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    photo_url: str = Field(default="", max_length=512)
    interview_process: InterviewProcess = Field(default_factory=InterviewProcess)

    model_config = {"extra": "forbid"}


class AlumniUpdateRequest(AlumniFields):
    """Partial update; unset fields are left untouched"""

    name: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    college_name: str | None = Field(default=None, max_length=255)
    graduation_year: str | None = Field(default=None, min_length=1, max_length=10)
    degree: str | None = Field(default=None, max_length=100)
    current_company: str | None = Field(default=None, max_length=200)
    current_role: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=500)
    expertise: list[str] | None = None
    social_links: SocialLinks | None = None
    photo_url: str | None = Field(default=None, max_length=512)
    interview_process: InterviewProcess | None = None

    model_config = {"extra": "forbid"}


class AlumniResponse(BaseModel):
    """Directory entry"""

    id: int
    name: str
    email: str
    college_name: str
    graduation_year: str
    degree: str | None = None
    current_company: str
    current_role: str
    location: str | None = None
    bio: str | None = None
    expertise: list[str] = Field(default_factory=list)
    social_links: dict = Field(default_factory=dict)
    interview_process: dict = Field(default_factory=dict)
    photo_url: str = ""

    model_config = {"from_attributes": True}


class AlumniActionResponse(BaseModel):
    """Create/update acknowledgement"""

    success: bool = True
    message: str
    alumni: AlumniResponse


class AlumniListResponse(BaseModel):
    """One page of the directory"""

    alumni: list[AlumniResponse]
    count: int
    total: int
    page: int
    page_size: int
    total_pages: int


class GroupCount(BaseModel):
    """Number of entries sharing a value"""

    value: str
    count: int


class AlumniStatsResponse(BaseModel):
    """Directory overview for administrators"""

    total: int
    top_companies: list[GroupCount]
    by_year: list[GroupCount]

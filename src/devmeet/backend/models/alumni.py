"""Alumni directory data model"""
from sqlmodel import Field, JSON
from .base import BaseModel


class Alumni(BaseModel, table=True):
    """Directory entry for a graduate, curated by administrators

    Removal is a soft delete; removed entries disappear from listings and
    lookups.
    """

    __tablename__ = "alumni"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=200, index=True)
    email: str = Field(max_length=255)
    college_name: str = Field(max_length=255)
    graduation_year: str = Field(max_length=10, index=True)
    degree: str | None = Field(default=None, max_length=100)
    current_company: str = Field(max_length=200, index=True)
    current_role: str = Field(max_length=200)
    location: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=500)
    expertise: list[str] = Field(default_factory=list, sa_type=JSON)
    social_links: dict = Field(default_factory=dict, sa_type=JSON)
    # rounds / description / tips / difficulty
    interview_process: dict = Field(default_factory=dict, sa_type=JSON)
    photo_url: str = Field(default="", max_length=512)

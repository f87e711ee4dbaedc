"""Shared schema helpers"""
import re
from typing import Any
from pydantic import BaseModel, Field
from ..utils.skills import normalize_list

_SYMBOLS = re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]\\/;'`~]")


def clean_skill_list(v: Any) -> list[str]:
    """Normalize skill input (list or legacy comma-separated string)"""
    return normalize_list(v)


def missing_password_requirements(password: str) -> list[str]:
    """List the strength requirements a password does not meet"""
    missing = []
    if not re.search(r"[A-Z]", password):
        missing.append("uppercase letter (A-Z)")
    if not re.search(r"[a-z]", password):
        missing.append("lowercase letter (a-z)")
    if not re.search(r"\d", password):
        missing.append("number (0-9)")
    if not _SYMBOLS.search(password):
        missing.append("special character (!@#$%^&*)")
    if len(password) < 8:
        missing.append("minimum 8 characters")
    return missing


class SocialLinks(BaseModel):
    """Social profile links"""

    linkedin: str | None = None
    github: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    portfolio: str | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement"""

    success: bool = True
    message: str


class PublicUserResponse(BaseModel):
    """Account data visible to other users (excludes sensitive data)"""

    id: int
    firstname: str
    lastname: str
    email: str
    photo_url: str = ""
    college: str | None = None
    year: str | None = None
    bio: str | None = None
    about: str | None = None
    age: int | None = None
    gender: str | None = None
    wants_to_learn: list[str] = Field(default_factory=list)
    can_teach: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    social_links: dict = Field(default_factory=dict)

    model_config = {"from_attributes": True}

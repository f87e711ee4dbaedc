"""Matching response models"""
from pydantic import BaseModel, Field
from .common import PublicUserResponse


class MatchDetails(BaseModel):
    """Skill overlap between the viewer and one peer"""

    common_learn: list[str] = Field(
        default_factory=list,
        description="Peer's taught skills the viewer wants to learn",
    )
    common_teach: list[str] = Field(
        default_factory=list,
        description="Peer's wanted skills the viewer can teach",
    )
    match_score: int = 0


class MatchResponse(BaseModel):
    """Ranked match entry"""

    user: PublicUserResponse
    details: MatchDetails


class MatchListResponse(BaseModel):
    """Ranked matches for the viewer"""

    success: bool = True
    count: int
    matches: list[MatchResponse]

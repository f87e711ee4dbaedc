"""Skill matching

A peer is a match when they teach something the viewer wants to learn, or
want to learn something the viewer teaches. The score counts both
directions. Skill comparison goes through ``utils.skills`` keys only;
display strings are taken from the candidate's own lists.
"""
from dataclasses import dataclass, field
from typing import Iterable
from sqlmodel import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import settings
from ..models import User, ConnectionRequest
from ..schemas.common import PublicUserResponse
from ..schemas.match import MatchDetails, MatchResponse, MatchListResponse
from ..utils.query import get_active_query
from ..utils.skills import keys_of, normalize_key, normalize_list
from ..exceptions import NotFoundError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass
class MatchResult:
    """Skill overlap of one candidate with the viewer"""

    candidate: User
    common_learn: list[str] = field(default_factory=list)
    common_teach: list[str] = field(default_factory=list)

    @property
    def match_score(self) -> int:
        return len(self.common_learn) + len(self.common_teach)


def _filter_by_keys(items: Iterable[str], keys: set[str]) -> list[str]:
    return [item for item in normalize_list(list(items)) if normalize_key(item) in keys]


def compute_single_match(viewer: User, candidate: User) -> MatchResult:
    """Compute the skill overlap between the viewer and one candidate

    ``common_learn`` is the candidate's taught skills the viewer wants;
    ``common_teach`` is the candidate's wanted skills the viewer teaches.
    """
    return MatchResult(
        candidate=candidate,
        common_learn=_filter_by_keys(candidate.can_teach or [], keys_of(viewer.wants_to_learn)),
        common_teach=_filter_by_keys(candidate.wants_to_learn or [], keys_of(viewer.can_teach)),
    )


def compute_matches(
    viewer: User,
    candidates: Iterable[User],
    excluded_ids: set[int] | None = None,
    limit: int | None = None,
) -> list[MatchResult]:
    """Rank candidates by match score

    Skips the viewer, excluded ids and unverified accounts, drops zero
    scores, sorts by score descending (ties keep candidate order) and
    keeps the top ``limit``.
    """
    excluded_ids = excluded_ids or set()
    limit = settings.match_result_limit if limit is None else limit

    results = []
    for candidate in candidates:
        if candidate.id == viewer.id or candidate.id in excluded_ids:
            continue
        if not candidate.is_email_verified:
            continue
        result = compute_single_match(viewer, candidate)
        if result.match_score > 0:
            results.append(result)

    # sorted() is stable, so equal scores keep candidate order
    results = sorted(results, key=lambda r: r.match_score, reverse=True)
    return results[:limit]


def to_match_response(result: MatchResult) -> MatchResponse:
    return MatchResponse(
        user=PublicUserResponse.model_validate(result.candidate),
        details=MatchDetails(
            common_learn=result.common_learn,
            common_teach=result.common_teach,
            match_score=result.match_score,
        ),
    )


class MatchService:
    """Matching service"""

    @staticmethod
    async def get_related_user_ids(session: AsyncSession, user_id: int) -> set[int]:
        """Ids of every account sharing a connection request with the user

        Args:
            session: Database session
            user_id: Viewer account id

        Returns:
            Set of counterpart ids (any status, any direction)
        """
        result = await session.execute(
            select(ConnectionRequest).where(
                or_(
                    ConnectionRequest.from_user_id == user_id,
                    ConnectionRequest.to_user_id == user_id,
                )
            )
        )
        return {request.counterpart_of(user_id) for request in result.scalars().all()}

    @staticmethod
    async def list_matches(
        session: AsyncSession,
        viewer: User,
    ) -> MatchListResponse:
        """Ranked matches for the viewer

        Args:
            session: Database session
            viewer: Current user

        Returns:
            MatchListResponse with at most ``match_result_limit`` entries
        """
        logger.info(f"Computing matches for user {viewer.id}")

        excluded_ids = await MatchService.get_related_user_ids(session, viewer.id)
        excluded_ids.add(viewer.id)

        query = (
            get_active_query(User)
            .where(User.is_email_verified == True)  # noqa: E712
            .where(User.id.not_in(excluded_ids))
            .order_by(User.id)
        )
        result = await session.execute(query)
        candidates = result.scalars().all()

        matches = compute_matches(viewer, candidates, excluded_ids)
        logger.info(
            f"Found {len(matches)} matches for user {viewer.id} "
            f"out of {len(candidates)} candidates"
        )
        return MatchListResponse(
            count=len(matches),
            matches=[to_match_response(match) for match in matches],
        )

    @staticmethod
    async def get_match(
        session: AsyncSession,
        viewer: User,
        user_id: int,
    ) -> MatchResponse:
        """Match card for one peer

        Raises:
            NotFoundError: Peer missing or unverified
        """
        logger.info(f"Computing match of user {viewer.id} with {user_id}")

        result = await session.execute(
            get_active_query(User).where(User.id == user_id)
        )
        candidate = result.scalar_one_or_none()

        if not candidate or not candidate.is_email_verified:
            raise NotFoundError("User not found")

        return to_match_response(compute_single_match(viewer, candidate))

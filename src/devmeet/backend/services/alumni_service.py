"""Alumni directory service

Any signed-in account can browse the directory; creating, editing, removing
entries and the statistics overview are reserved for administrators (the
route layer enforces that).
"""
from sqlmodel import select, or_
from sqlalchemy import String, cast, func
from sqlalchemy.ext.asyncio import AsyncSession
from ..models import Alumni
from ..schemas.alumni import (
    AlumniCreateRequest,
    AlumniUpdateRequest,
    AlumniResponse,
    AlumniActionResponse,
    AlumniListResponse,
    AlumniStatsResponse,
    GroupCount,
)
from ..schemas.common import MessageResponse
from ..utils.query import get_active_query
from ..exceptions import NotFoundError
from ..logger import get_logger

logger = get_logger(__name__)

TOP_COMPANIES_LIMIT = 10


class AlumniService:
    """Alumni directory service"""

    @staticmethod
    async def _get_entry(session: AsyncSession, alumni_id: int) -> Alumni:
        result = await session.execute(
            get_active_query(Alumni).where(Alumni.id == alumni_id)
        )
        alumni = result.scalar_one_or_none()
        if not alumni:
            logger.warning(f"Alumni entry not found: {alumni_id}")
            raise NotFoundError("Alumni not found")
        return alumni

    @staticmethod
    async def list_alumni(
        session: AsyncSession,
        company: str | None = None,
        college: str | None = None,
        year: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> AlumniListResponse:
        """List directory entries, newest first

        Args:
            company: Case-insensitive substring of the current company
            college: Case-insensitive substring of the college name
            year: Exact graduation year
            search: Case-insensitive substring of name, role or any expertise tag
            page: 1-based page number
            page_size: Entries per page

        Returns:
            AlumniListResponse with pagination metadata
        """
        # 1. Build WHERE clause shared by count and data queries
        base_where = [Alumni.deleted_at.is_(None)]
        if company:
            base_where.append(Alumni.current_company.icontains(company, autoescape=True))
        if college:
            base_where.append(Alumni.college_name.icontains(college, autoescape=True))
        if year:
            base_where.append(Alumni.graduation_year == year)
        if search:
            base_where.append(
                or_(
                    Alumni.name.icontains(search, autoescape=True),
                    Alumni.current_role.icontains(search, autoescape=True),
                    cast(Alumni.expertise, String).icontains(search, autoescape=True),
                )
            )

        # 2. Total count
        count_result = await session.execute(
            select(func.count(Alumni.id)).where(*base_where)
        )
        total = count_result.scalar() or 0

        # 3. Page of entries
        offset = (page - 1) * page_size
        total_pages = (total + page_size - 1) // page_size
        result = await session.execute(
            select(Alumni)
            .where(*base_where)
            .order_by(Alumni.created_at.desc(), Alumni.id.desc())
            .limit(page_size)
            .offset(offset)
        )
        entries = [AlumniResponse.model_validate(a) for a in result.scalars().all()]

        logger.info(
            f"Listed alumni: page={page}/{total_pages}, items={len(entries)}, total={total}"
        )
        return AlumniListResponse(
            alumni=entries,
            count=len(entries),
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )

    @staticmethod
    async def get_alumni(session: AsyncSession, alumni_id: int) -> AlumniResponse:
        """Raises NotFoundError for unknown or removed entries"""
        alumni = await AlumniService._get_entry(session, alumni_id)
        return AlumniResponse.model_validate(alumni)

    @staticmethod
    async def create_alumni(
        session: AsyncSession,
        request: AlumniCreateRequest,
    ) -> AlumniActionResponse:
        alumni = Alumni(
            **request.model_dump(exclude={"social_links", "interview_process"}),
            social_links=request.social_links.model_dump(exclude_none=True),
            interview_process=request.interview_process.model_dump(exclude_none=True),
        )
        session.add(alumni)
        await session.commit()
        await session.refresh(alumni)

        logger.info(f"Alumni entry {alumni.id} created for {alumni.email}")
        return AlumniActionResponse(
            message="Alumni added successfully",
            alumni=AlumniResponse.model_validate(alumni),
        )

    @staticmethod
    async def update_alumni(
        session: AsyncSession,
        alumni_id: int,
        request: AlumniUpdateRequest,
    ) -> AlumniActionResponse:
        """Apply the fields present in the request

        Explicit nulls on required columns are ignored.

        Raises:
            NotFoundError: Unknown or removed entry
        """
        alumni = await AlumniService._get_entry(session, alumni_id)

        changes = request.model_dump(exclude_unset=True)
        logger.info(f"Updating alumni entry {alumni_id}: {sorted(changes)}")

        for name, value in changes.items():
            if name == "social_links":
                value = request.social_links.model_dump(exclude_none=True) if request.social_links else {}
            elif name == "interview_process":
                value = (
                    request.interview_process.model_dump(exclude_none=True)
                    if request.interview_process else {}
                )
            elif name == "expertise" and value is None:
                value = []
            elif name == "photo_url" and value is None:
                value = ""
            elif value is None and name in (
                "name", "email", "college_name", "graduation_year",
                "current_company", "current_role",
            ):
                continue
            setattr(alumni, name, value)

        alumni.touch()
        session.add(alumni)
        await session.commit()
        await session.refresh(alumni)

        return AlumniActionResponse(
            message="Alumni updated successfully",
            alumni=AlumniResponse.model_validate(alumni),
        )

    @staticmethod
    async def remove_alumni(session: AsyncSession, alumni_id: int) -> MessageResponse:
        """Soft-delete an entry

        Raises:
            NotFoundError: Unknown or already removed entry
        """
        alumni = await AlumniService._get_entry(session, alumni_id)
        alumni.soft_delete()
        session.add(alumni)
        await session.commit()

        logger.info(f"Alumni entry {alumni_id} removed")
        return MessageResponse(message="Alumni removed successfully")

    @staticmethod
    async def get_stats(session: AsyncSession) -> AlumniStatsResponse:
        """Entry total, most common companies and per-year counts"""
        live = Alumni.deleted_at.is_(None)

        total_result = await session.execute(select(func.count(Alumni.id)).where(live))
        total = total_result.scalar() or 0

        company_count = func.count(Alumni.id).label("count")
        company_result = await session.execute(
            select(Alumni.current_company, company_count)
            .where(live)
            .group_by(Alumni.current_company)
            .order_by(company_count.desc(), Alumni.current_company)
            .limit(TOP_COMPANIES_LIMIT)
        )
        year_result = await session.execute(
            select(Alumni.graduation_year, func.count(Alumni.id))
            .where(live)
            .group_by(Alumni.graduation_year)
            .order_by(Alumni.graduation_year.desc())
        )

        return AlumniStatsResponse(
            total=total,
            top_companies=[
                GroupCount(value=company, count=count)
                for company, count in company_result.all()
            ],
            by_year=[
                GroupCount(value=year, count=count)
                for year, count in year_result.all()
            ],
        )

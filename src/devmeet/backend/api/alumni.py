"""Alumni directory API endpoints"""
from fastapi import APIRouter, Query
from .deps import SessionDep, CurrentUser, AdminUser
from ..schemas import (
    AlumniCreateRequest,
    AlumniUpdateRequest,
    AlumniResponse,
    AlumniActionResponse,
    AlumniListResponse,
    AlumniStatsResponse,
    MessageResponse,
)
from ..services import AlumniService
from ..logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/alumni", tags=["Alumni"])


@router.get("", response_model=AlumniListResponse)
async def list_alumni(
    session: SessionDep,
    current_user: CurrentUser,
    company: str | None = Query(None, description="Filter by current company (substring)"),
    college: str | None = Query(None, description="Filter by college name (substring)"),
    year: str | None = Query(None, description="Filter by graduation year"),
    search: str | None = Query(None, description="Search name, role and expertise"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(50, ge=1, le=200, description="Number of items per page"),
) -> AlumniListResponse:
    """Browse the alumni directory"""
    return await AlumniService.list_alumni(
        session,
        company=company,
        college=college,
        year=year,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.get("/stats/overview", response_model=AlumniStatsResponse)
async def alumni_stats(session: SessionDep, admin: AdminUser) -> AlumniStatsResponse:
    """Directory statistics (admin only)"""
    return await AlumniService.get_stats(session)


@router.get("/{alumni_id}", response_model=AlumniResponse)
async def get_alumni(
    alumni_id: int,
    session: SessionDep,
    current_user: CurrentUser,
) -> AlumniResponse:
    return await AlumniService.get_alumni(session, alumni_id)


@router.post("", response_model=AlumniActionResponse, status_code=201)
async def create_alumni(
    request: AlumniCreateRequest,
    session: SessionDep,
    admin: AdminUser,
) -> AlumniActionResponse:
    """Add a directory entry (admin only)

    - **name**, **email**, **college_name**, **graduation_year**,
      **current_company** and **current_role** are required
    """
    logger.info(f"API: Admin {admin.id} adding alumni {request.email}")
    return await AlumniService.create_alumni(session, request)


@router.put("/{alumni_id}", response_model=AlumniActionResponse)
async def update_alumni(
    alumni_id: int,
    request: AlumniUpdateRequest,
    session: SessionDep,
    admin: AdminUser,
) -> AlumniActionResponse:
    """Edit a directory entry (admin only)"""
    return await AlumniService.update_alumni(session, alumni_id, request)


@router.delete("/{alumni_id}", response_model=MessageResponse)
async def remove_alumni(
    alumni_id: int,
    session: SessionDep,
    admin: AdminUser,
) -> MessageResponse:
    """Remove a directory entry (admin only)"""
    logger.info(f"API: Admin {admin.id} removing alumni {alumni_id}")
    return await AlumniService.remove_alumni(session, alumni_id)

import pytest

from devmeet.backend.exceptions import NotFoundError
from devmeet.backend.schemas import AlumniCreateRequest, AlumniUpdateRequest
from devmeet.backend.services import AlumniService


def entry(**fields):
    values = {
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "college_name": "Yale",
        "graduation_year": "1934",
        "current_company": "Navy",
        "current_role": "Rear Admiral",
    }
    values.update(fields)
    return AlumniCreateRequest(**values)


async def test_update_ignores_nulls_on_required_fields(session):
    created = await AlumniService.create_alumni(session, entry(expertise=[" COBOL ", ""]))
    assert created.alumni.expertise == ["COBOL"]

    response = await AlumniService.update_alumni(
        session,
        created.alumni.id,
        AlumniUpdateRequest(name=None, bio="Compiler pioneer", expertise=None),
    )

    assert response.alumni.name == "Grace Hopper"
    assert response.alumni.bio == "Compiler pioneer"
    assert response.alumni.expertise == []


async def test_filters_treat_wildcards_literally(session):
    await AlumniService.create_alumni(session, entry(current_company="100% Remote"))
    await AlumniService.create_alumni(session, entry(name="Linus", current_company="Linux"))

    assert (await AlumniService.list_alumni(session, company="%")).total == 1
    assert (await AlumniService.list_alumni(session, company="_")).total == 0
    assert (await AlumniService.list_alumni(session, company="li")).total == 1


async def test_empty_directory_pagination(session):
    listing = await AlumniService.list_alumni(session, page=3, page_size=10)
    assert listing.alumni == []
    assert listing.total == 0
    assert listing.total_pages == 0


async def test_missing_entry(session):
    with pytest.raises(NotFoundError):
        await AlumniService.get_alumni(session, 42)
    with pytest.raises(NotFoundError):
        await AlumniService.update_alumni(session, 42, AlumniUpdateRequest(bio="x"))

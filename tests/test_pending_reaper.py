import asyncio
from datetime import datetime, timedelta

from sqlmodel import select

from devmeet.backend.models import PendingSignup
from devmeet.backend.services import PendingSignupReaper


def pending(email, expires_in):
    return PendingSignup(
        firstname="Pat",
        lastname="Dev",
        email=email,
        hashed_password="x",
        email_verification_otp="123456",
        otp_expiry=datetime.now() + expires_in,
    )


async def remaining_emails(session):
    result = await session.execute(select(PendingSignup.email).order_by(PendingSignup.email))
    return list(result.scalars().all())


async def test_reap_once_deletes_only_expired(session):
    session.add(pending("old@example.com", timedelta(minutes=-1)))
    session.add(pending("new@example.com", timedelta(minutes=5)))
    await session.commit()

    deleted = await PendingSignupReaper.reap_once(session)

    assert deleted == 1
    assert await remaining_emails(session) == ["new@example.com"]


async def test_reaper_loop_runs_until_stopped(session, session_factory):
    session.add(pending("old@example.com", timedelta(minutes=-1)))
    await session.commit()

    reaper = PendingSignupReaper(session_factory, interval_seconds=0.01)
    reaper.start()
    for _ in range(100):
        if not await remaining_emails(session):
            break
        await asyncio.sleep(0.01)
    await reaper.stop()

    assert await remaining_emails(session) == []

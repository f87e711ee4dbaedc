"""Background eviction of expired pending signups"""
import asyncio
from datetime import datetime
from typing import Callable
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from ..models import PendingSignup
from ..logger import get_logger

logger = get_logger(__name__)


class PendingSignupReaper:
    """Periodically deletes pending signups whose passcode has expired

    Eviction runs on an interval, so an expired row may survive for up to
    one interval; passcode verification re-checks expiry on its own.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession], interval_seconds: float):
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @staticmethod
    async def reap_once(session: AsyncSession, now: datetime | None = None) -> int:
        """Delete expired pending signups

        Returns:
            Number of rows deleted
        """
        now = now or datetime.now()
        result = await session.execute(
            delete(PendingSignup).where(PendingSignup.otp_expiry < now)
        )
        await session.commit()
        return result.rowcount or 0

    async def _run(self):
        while True:
            try:
                async with self._session_factory() as session:
                    deleted = await self.reap_once(session)
                if deleted:
                    logger.info(f"Evicted {deleted} expired pending signup(s)")
            except Exception as e:
                logger.error(f"Pending signup eviction failed: {e}", exc_info=True)
            await asyncio.sleep(self._interval)

    def start(self):
        """Start the eviction loop on the running event loop"""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Pending signup reaper started (interval: {self._interval}s)")

    async def stop(self):
        """Cancel the eviction loop"""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Pending signup reaper stopped")

"""Create-admin command implementation"""
import asyncio
import sys
from ..utils import use_instance_path


async def _promote(email: str):
    from ...backend.database import async_session_maker
    from ...backend.services import AuthService

    async with async_session_maker() as session:
        return await AuthService.create_admin(session, email)


def create_admin_command(email: str, path: str = None):
    """Promote an existing account to administrator

    Local shell access stands in for the admin secret.

    Args:
        email: Account email
        path: Instance directory path
    """
    use_instance_path(path)

    from ...backend.exceptions import DevMeetException

    try:
        result = asyncio.run(_promote(email.strip().lower()))
    except DevMeetException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ {result.message}")

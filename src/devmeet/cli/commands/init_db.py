"""Init-db command implementation"""
from ..utils import use_instance_path


def init_db_command(path: str = None):
    """Create database tables

    Args:
        path: Instance directory path (default: $DEVMEET_INSTANCE_PATH or ~/.devmeet)
    """
    use_instance_path(path)

    from ...backend.config import settings
    from ...backend.database import create_db_and_tables

    print(f"Initializing database: {settings.database_url}")
    create_db_and_tables()
    print("✓ Database initialized")

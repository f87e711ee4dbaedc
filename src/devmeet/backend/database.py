"""Database connection and session management"""
from pathlib import Path
from sqlmodel import SQLModel, create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from .config import settings
from .logger import get_logger

# Import all models to ensure they are registered with SQLModel
from .models.user import User, PendingSignup  # noqa: F401
from .models.connection_request import ConnectionRequest  # noqa: F401
from .models.alumni import Alumni  # noqa: F401

logger = get_logger(__name__)


def _to_async_url(url: str) -> str:
    """Convert sqlite:/// to sqlite+aiosqlite:///"""
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database"""
    prefix = "sqlite:///"
    if url.startswith(prefix) and ":memory:" not in url:
        Path(url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


_connect_args = (
    {"check_same_thread": False}
    if settings.database_url.startswith("sqlite")
    else {}
)

# Create sync engine for table creation
sync_engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=_connect_args,
)

# Create async engine for runtime operations
engine = create_async_engine(
    _to_async_url(settings.database_url),
    echo=settings.debug,
    connect_args=_connect_args,
)

# Create async session factory
async_session_maker = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


def create_db_and_tables():
    """Create database tables (sync operation)"""
    logger.info("Creating database tables...")
    try:
        _ensure_sqlite_directory(settings.database_url)
        SQLModel.metadata.create_all(sync_engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise


async def get_session():
    """Get async database session (for dependency injection)"""
    async with async_session_maker() as session:
        yield session

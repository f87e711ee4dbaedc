"""Shared fixtures"""
import os
from pathlib import Path

# Settings are read at import time; keep tests away from a real instance
os.environ["DEVMEET_INSTANCE_PATH"] = str(Path(__file__).parent / ".no-instance")
os.environ["DEVMEET_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["DEVMEET_ENVIRONMENT"] = "development"
os.environ["DEVMEET_SMTP_USER"] = ""
os.environ["DEVMEET_SMTP_PASSWORD"] = ""
os.environ["DEVMEET_ADMIN_SECRET"] = "test-admin-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from devmeet.backend.auth import create_access_token, get_password_hash
from devmeet.backend.config import settings
from devmeet.backend.database import get_session
from devmeet.backend.enums import Environment
from devmeet.backend.exceptions import UpstreamUnavailableError
from devmeet.backend.main import app
from devmeet.backend.models import User
from devmeet.backend.websocket import RoomRouter

PASSWORD = "Secret1!"


class FakeNotifier:
    """Records outbound notifications instead of sending them"""

    is_configured = True

    def __init__(self):
        self.passcodes: list[tuple[str, str]] = []
        self.welcomes: list[str] = []
        self.resets: list[tuple[str, str]] = []
        self.fail = False
        self.fail_welcome = False

    async def send_passcode(self, to_email, code, name):
        if self.fail:
            raise UpstreamUnavailableError("Failed to send email")
        self.passcodes.append((to_email, code))

    async def send_welcome(self, to_email, name):
        if self.fail or self.fail_welcome:
            raise UpstreamUnavailableError("Failed to send email")
        self.welcomes.append(to_email)

    async def send_password_reset(self, to_email, token, name):
        if self.fail:
            raise UpstreamUnavailableError("Failed to send email")
        self.resets.append((to_email, token))

    def reset_url(self, token):
        return f"http://frontend.test/reset-password?token={token}"

    def last_passcode(self, email):
        return [code for to, code in self.passcodes if to == email][-1]


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash(PASSWORD)


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "environment", Environment.PRODUCTION)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


def _user_fields(email, password_hash, **fields):
    values = {
        "firstname": email.split("@")[0].capitalize(),
        "lastname": "Dev",
        "email": email,
        "hashed_password": password_hash,
        "is_email_verified": True,
    }
    values.update(fields)
    return values


@pytest.fixture
def make_user(session, password_hash):
    """Insert an account directly (verified unless told otherwise)"""

    async def factory(email, **fields):
        user = User(**_user_fields(email, password_hash, **fields))
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return factory


# ---------------------------------------------------------------------------
# HTTP / WebSocket fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_db(tmp_path):
    """File-backed database shared by the test and the client thread"""
    path = tmp_path / "api.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    SQLModel.metadata.create_all(sync_engine)
    async_engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    yield sync_engine, async_engine
    sync_engine.dispose()


@pytest.fixture
def client(api_db, notifier):
    _, async_engine = api_db
    factory = sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    original_notifier = app.state.notifier
    original_router = app.state.room_router
    app.state.notifier = notifier
    app.state.room_router = RoomRouter()

    # Not entered as a context manager: lifespan would touch the real database
    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.notifier = original_notifier
    app.state.room_router = original_router


@pytest.fixture
def seed_user(api_db, password_hash):
    """Insert an account through the sync engine and return (id, token)"""
    sync_engine, _ = api_db

    def factory(email, **fields):
        with Session(sync_engine) as db:
            user = User(**_user_fields(email, password_hash, **fields))
            db.add(user)
            db.commit()
            db.refresh(user)
            user_id = user.id
        return user_id, create_access_token(data={"sub": str(user_id)})

    return factory

"""Test fixtures for the EquiManage backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")

from app.api import deps
from app.core.config import get_settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import dispose_engine, get_sessionmaker
from app.main import app
from app.models import Profile, ProfileRole


class RecordingMailer:
    """Mailer double that keeps every message instead of sending it."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict[str, str]] = []

    async def send(self, *, to: str, subject: str, html: str) -> bool:
        if self.fail:
            raise ConnectionError("SMTP relay unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return True


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest_asyncio.fixture()
async def app_context(
    reset_database: None, db_url: str, mailer: RecordingMailer
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, a recording mailer and seeded profiles."""
    sessionmaker = get_sessionmaker(db_url)
    owner_password = "Passw0rd!"
    vet_password = "VetPass1!"

    async with sessionmaker() as session:
        owner = Profile(
            email="owner@example.com",
            hashed_password=get_password_hash(owner_password),
            role=ProfileRole.OWNER,
            first_name="Olivia",
            last_name="Owner",
            stall_name="Riverside Stables",
        )
        vet = Profile(
            email="vet@example.com",
            hashed_password=get_password_hash(vet_password),
            role=ProfileRole.VET,
            first_name="Victor",
            last_name="Vet",
            practice_name="Riverside Equine Clinic",
        )
        session.add_all([owner, vet])
        await session.commit()

        context: dict[str, object] = {
            "owner_id": owner.id,
            "owner_email": owner.email,
            "owner_password": owner_password,
            "vet_email": vet.email,
            "vet_password": vet_password,
            "mailer": mailer,
        }

    app.dependency_overrides[deps.get_mailer] = lambda: mailer
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(deps.get_mailer, None)

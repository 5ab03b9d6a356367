"""
Pytest fixtures for the onboarding identity service.
"""

import os
import tempfile
from typing import AsyncGenerator, List

# Point the application at a throwaway database before anything imports it
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_tmp.name}")
os.environ.setdefault("MAIL_BACKEND", "console")

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from onboarding.config import Settings
from onboarding.database import create_engine_for, create_session_maker
from onboarding.kernel.errors import NotificationError
from onboarding.kernel.identity.identity_service import IdentityService
from onboarding.kernel.identity.jwt import TokenIssuer
from onboarding.kernel.identity.password import PasswordHasher
from onboarding.kernel.models import Base, User, VerificationToken
from onboarding.kernel.notifications.mailer import Notification
from onboarding.kernel.persistence.unit_of_work import UnitOfWork

TEST_SECRET = "test-secret-key-for-testing-only"


class RecordingNotifier:
    """Notifier that keeps every message instead of sending it."""

    def __init__(self):
        self.sent: List[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)


class FailingNotifier:
    """Notifier whose relay is always down."""

    def __init__(self):
        self.attempts = 0

    async def send(self, notification: Notification) -> None:
        self.attempts += 1
        raise NotificationError("Email could not be delivered. Please try again later.")


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB file after test run."""
    if os.path.exists(_tmp.name):
        os.unlink(_tmp.name)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        secret_key=TEST_SECRET,
        base_url="https://app.example.com/",
        product_name="MyCashier",
        mail_from="noreply@example.com",
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh file-backed SQLite database per test (in-memory DBs are per-connection)."""
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'identity.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(db_engine)


@pytest.fixture
def unit_of_work(session_maker) -> UnitOfWork:
    return UnitOfWork(session_maker)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET, algorithm="HS256")


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def build_identity(unit_of_work, notifier, hasher, issuer, settings):
    """Factory for an IdentityService with selected collaborators or settings replaced."""

    def _build(**overrides) -> IdentityService:
        options = {
            "unit_of_work": unit_of_work,
            "notifier": notifier,
            "hasher": hasher,
            "issuer": issuer,
            "settings": settings,
        }
        options.update(overrides)
        return IdentityService(**options)

    return _build


@pytest.fixture
def identity(build_identity) -> IdentityService:
    return build_identity()


class DatabaseInspector:
    """Reads committed state through a separate session."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def count(self, model) -> int:
        async with self.session_maker() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    async def user(self, email_address: str):
        async with self.session_maker() as session:
            result = await session.execute(
                select(User).where(User.email_address == email_address)
            )
            return result.scalar_one_or_none()

    async def tokens_for(self, user_id) -> List[VerificationToken]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(VerificationToken).where(VerificationToken.user_id == user_id)
            )
            return list(result.scalars().all())


@pytest.fixture
def db(session_maker) -> DatabaseInspector:
    return DatabaseInspector(session_maker)

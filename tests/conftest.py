"""Pytest configuration for all tests."""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from memberdesk.core.config import get_settings
from memberdesk.infrastructure.auth import hash_password, jwt_service
from memberdesk.infrastructure.persistence.database import Base
from memberdesk.infrastructure.persistence.models import (
    AccountIdentityModel,
    MemberModel,
    UserRoleModel,
)

PLACEHOLDER_DOMAIN = "temp.memberdesk.local"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings for every test so env patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from memberdesk.infrastructure.api.app import app
    from memberdesk.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


async def create_linked_member(
    session: AsyncSession,
    member_number: str,
    password: str,
    *,
    role: str | None = "member",
    password_changed: bool = False,
    email: str | None = None,
) -> tuple[MemberModel, AccountIdentityModel]:
    """Insert a member together with a local identity and optional role."""
    email = email or f"{member_number.lower()}@{PLACEHOLDER_DOMAIN}"
    identity = AccountIdentityModel(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=hash_password(password),
        user_metadata={"member_number": member_number},
    )
    member = MemberModel(
        id=str(uuid.uuid4()),
        member_number=member_number,
        email=email,
        full_name=member_number,
        verified=True,
        email_verified=True,
        password_changed=password_changed,
        first_time_login=not password_changed,
        auth_user_id=identity.id,
    )
    session.add_all([identity, member])
    if role:
        session.add(UserRoleModel(user_id=identity.id, role=role))
    await session.commit()
    await session.refresh(member)
    await session.refresh(identity)
    return member, identity


def token_for(identity: AccountIdentityModel) -> str:
    return jwt_service.create_access_token(
        user_id=identity.id,
        email=identity.email,
        metadata=identity.user_metadata,
    )


@pytest_asyncio.fixture
async def admin_token(db_session: AsyncSession) -> str:
    """Create an admin member and return their access token."""
    _, identity = await create_linked_member(
        db_session, "AD0001", "AdminPass1", role="admin", password_changed=True
    )
    return token_for(identity)


@pytest_asyncio.fixture
async def member_token(db_session: AsyncSession) -> str:
    """Create a regular member still on the default password and return their token."""
    _, identity = await create_linked_member(db_session, "MB0001", "MB0001")
    return token_for(identity)


@pytest.fixture
def make_linked_member(db_session: AsyncSession):
    """Factory fixture around create_linked_member bound to the test session."""

    async def _make(member_number: str, password: str, **kwargs):
        return await create_linked_member(db_session, member_number, password, **kwargs)

    return _make


@pytest.fixture
def issue_token():
    """Factory fixture issuing an access token for an identity."""
    return token_for

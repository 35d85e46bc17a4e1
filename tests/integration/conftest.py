"""Integration test fixtures for database and HTTP client operations.

Every test gets a fresh in-memory SQLite database. StaticPool keeps the single
connection alive, so the app's request sessions, the isolated audit session
and the test's own session all see the same data.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import src.taskhub.core.db.engine as engine_module
from src.taskhub.core.db import create_tables
from src.taskhub.main import create_app
from src.taskhub.models import Organization, OrganizationRole, User
from tests.helpers import create_organization, create_user_with_membership


@pytest.fixture
async def engine(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """Create the test engine and install it as the app's engine singleton."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    monkeypatch.setattr(engine_module, "_engine", test_engine)
    await create_tables(test_engine)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting data.

    Tests must call ``await session.commit()`` before issuing requests so the
    app sees the rows.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@dataclass
class TwoOrganizations:
    """Org A with one member per role, org B with only its owner."""

    org_a: Organization
    org_b: Organization
    owner_a: User
    admin_a: User
    viewer_a: User
    owner_b: User


@pytest.fixture
async def two_orgs(db_session: AsyncSession) -> TwoOrganizations:
    org_a = await create_organization(db_session, name="Org A")
    org_b = await create_organization(db_session, name="Org B")

    owner_a, _ = await create_user_with_membership(db_session, org_a, OrganizationRole.OWNER)
    admin_a, _ = await create_user_with_membership(db_session, org_a, OrganizationRole.ADMIN)
    viewer_a, _ = await create_user_with_membership(db_session, org_a, OrganizationRole.VIEWER)
    owner_b, _ = await create_user_with_membership(db_session, org_b, OrganizationRole.OWNER)
    await db_session.commit()

    return TwoOrganizations(
        org_a=org_a,
        org_b=org_b,
        owner_a=owner_a,
        admin_a=admin_a,
        viewer_a=viewer_a,
        owner_b=owner_b,
    )

"""
Pytest configuration and fixtures.
Provides test app client, async DB session replacement and data factories.
"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from portal.main import app
from portal.db import session as db_session
from portal.db.base import Base
from portal.db.session import get_db
from portal.domain.entities import ContractorType, SubmissionStatus, UserRole, period_bounds
from portal.domain.status_mapping import to_storage
from portal.models import Project, Submission, User


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def test_client(test_session_maker, monkeypatch):
    """
    Create a test HTTP client bound to the test database.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(db_session, "async_session_maker", test_session_maker)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(test_db_session):
    """Factory for committed users."""
    async def _make(role: UserRole = UserRole.CONTRACTOR, **kwargs) -> User:
        suffix = uuid4().hex[:8]
        values = {
            "full_name": f"{role.value.title()} {suffix}",
            "email": f"{role.value.lower()}-{suffix}@example.com",
            "role": role,
            "is_active": True,
            "contractor_type": ContractorType.HOURLY,
        }
        values.update(kwargs)
        user = User(**values)
        test_db_session.add(user)
        await test_db_session.commit()
        return user

    return _make


@pytest.fixture
def make_project(test_db_session):
    async def _make(name: str = "Platform", manager: User = None) -> Project:
        project = Project(name=name, manager_id=manager.id if manager else None, is_active=True)
        test_db_session.add(project)
        await test_db_session.commit()
        return project

    return _make


@pytest.fixture
def make_submission(test_db_session):
    """Factory for committed submissions in any status."""
    async def _make(
        contractor: User,
        manager: User = None,
        status: SubmissionStatus = SubmissionStatus.PENDING,
        work_period: str = "2026-01",
        **kwargs,
    ) -> Submission:
        start, end = period_bounds(work_period)
        values = {
            "contractor_id": contractor.id,
            "manager_id": manager.id if manager else None,
            "work_period": work_period,
            "period_start": start,
            "period_end": end,
            "project_name": "General Work",
            "description": "Feature work",
            "regular_hours": Decimal("160"),
            "overtime_hours": Decimal("0"),
            "contractor_type": ContractorType.HOURLY,
            "total_amount": Decimal("12000.00"),
            "status": to_storage(status),
            "submitted_at": datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc),
        }
        if status in (SubmissionStatus.APPROVED, SubmissionStatus.PAID):
            values["approved_at"] = datetime(2026, 2, 2, tzinfo=timezone.utc)
        if status == SubmissionStatus.PAID:
            values["paid_at"] = datetime(2026, 2, 3, tzinfo=timezone.utc)
        if status == SubmissionStatus.REJECTED:
            values["rejection_reason"] = "Hours do not match the project log"
        if status == SubmissionStatus.NEEDS_CLARIFICATION:
            values["admin_note"] = "Please explain the weekend hours"
        values.update(kwargs)
        submission = Submission(**values)
        test_db_session.add(submission)
        await test_db_session.commit()
        return submission

    return _make

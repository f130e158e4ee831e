"""Service test fixtures — async DB, FastAPI test client, session tokens, seed rows.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe hits the test DB
    - get_resume_storage overridden with FakeResumeStorage (no HTTP)

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so rows written by the
      test are visible to the request and the partial unique index is real
    - Tokens are minted with PyJWT against the same secret the middleware reads
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_resume_storage
from app.core.domain_types import ApplicationStatus, JobStatus
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models.application import Application
from app.models.company import Company
from app.models.job import Job
from app.models.seeker_profile import SeekerProfile
import app.infrastructure.database as db_module
from app.main import app

from tests.services.session_fakes import (
    EMPLOYER_ID, OTHER_EMPLOYER_ID, SEEKER_ID, FakeResumeStorage,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return FakeResumeStorage()


@pytest.fixture
async def client(test_engine, test_session_factory, storage):
    """FastAPI test client with DB and storage dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resume_storage] = lambda: storage

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed data ──────────────────────────────────────────────────

@pytest.fixture
async def company(test_db):
    row = Company(owner_id=EMPLOYER_ID, name="Acme")
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def other_company(test_db):
    row = Company(owner_id=OTHER_EMPLOYER_ID, name="Globex")
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def job(test_db, company):
    row = Job(company_id=company.id, title="Backend Engineer", status=JobStatus.ACTIVE.value)
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def closed_job(test_db, company):
    row = Job(company_id=company.id, title="Old Posting", status=JobStatus.CLOSED.value)
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def seeker_profile(test_db):
    row = SeekerProfile(user_id=SEEKER_ID, resume_reference="profile-cv.pdf")
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def application(test_db, job):
    row = Application(
        job_id=job.id, applicant_id=SEEKER_ID,
        resume_reference="profile-cv.pdf",
        status=ApplicationStatus.SUBMITTED.value, version=1,
    )
    test_db.add(row)
    await test_db.commit()
    return row

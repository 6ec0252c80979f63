"""
Shared test fixtures: in-memory database, seeded user and course, API client.
"""

import os

# Must be set before anything under src/ reads the settings.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_CREATE_ALL"] = "false"

from datetime import timedelta

import httpx
import pytest


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from src.models.models import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def principal(test_async_db):
    """Persisted login user acting as the authenticated caller."""
    from src.auth.auth_service import create_user

    user = await create_user("moderador", "moderador123", test_async_db)
    await test_async_db.commit()
    return user


@pytest.fixture
async def course(test_async_db):
    from src.models.models import Course

    course = Course(name="Java", category="Programacion")
    test_async_db.add(course)
    await test_async_db.commit()
    return course


@pytest.fixture
def topic_payload(course):
    """Valid registration data for a topic in the `course` fixture."""
    return {
        "title": "Error al compilar Java",
        "body": "El compilador falla con un error extraño al iniciar.",
        "author": "Ana",
        "course_id": course.id,
    }


@pytest.fixture
def auth_headers(principal):
    from src.auth.auth_service import create_access_token

    token = create_access_token({"sub": principal.login}, expires_delta=timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(test_async_db):
    """
    httpx client bound to the app, with every request sharing the test session.
    """
    from src.common.database.database import get_db_session
    from src.main import app

    async def override_get_db_session():
        yield test_async_db

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from course_catalog.api.deps import get_db_session
from course_catalog.api.main import app
from course_catalog.core.auth import create_access_token
from course_catalog.infrastructure.db.base import Base
from course_catalog.infrastructure.db.session import create_engine
from course_catalog.libs.backend_client import BackendClient

BASE_URL = "http://test"


@pytest.fixture()
async def session_factory(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
def api(session_factory: async_sessionmaker[AsyncSession]) -> Iterator[FastAPI]:
    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    yield app
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def transport(api: FastAPI) -> ASGITransport:
    return ASGITransport(app=api)  # type: ignore[arg-type]


@pytest.fixture()
async def async_client(transport: ASGITransport) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing the routes directly."""
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture()
def student_token() -> str:
    return create_access_token(
        "student-1",
        name="Alex Student",
        image="https://example.com/alex.png",
        email="alex@example.com",
    )


@pytest.fixture()
def other_student_token() -> str:
    return create_access_token("student-2", name="Blake Other")


@pytest.fixture()
def auth_headers(student_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {student_token}"}


@pytest.fixture()
def other_auth_headers(other_student_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {other_student_token}"}


@pytest.fixture()
def backend_client(transport: ASGITransport, student_token: str) -> BackendClient:
    """Backend client signed in as student-1, talking to the in-process API."""
    return BackendClient(base_url=BASE_URL, token=student_token, transport=transport)


@pytest.fixture()
def anonymous_backend_client(transport: ASGITransport) -> BackendClient:
    return BackendClient(base_url=BASE_URL, transport=transport)

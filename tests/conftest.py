import asyncio
import os
from collections.abc import Awaitable, Callable
from datetime import date, time, timedelta
from typing import Any

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import app.models  # noqa: F401 - register tables
from app.core.db import get_session
from app.main import app
from app.models.availability import Availability
from app.models.service import Service
from app.services.auth_service import ensure_admin_user
from app.services.lead_service import LeadLog
from app.services.slot_service import studio_today

ADMIN_EMAIL = "admin@studiojulia.com.br"
ADMIN_PASSWORD = "senha-forte-123"

RunDb = Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]


@pytest.fixture
def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def _create() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    asyncio.run(_create())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def enforce_foreign_keys(engine) -> None:
    """SQLite ignores foreign keys unless asked; Postgres always enforces them."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def run_db(session_maker) -> RunDb:
    """Run an async function against a fresh session and commit afterwards."""

    def _run(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async def _inner() -> Any:
            async with session_maker() as session:
                result = await fn(session)
                await session.commit()
                return result

        return asyncio.run(_inner())

    return _run


@pytest.fixture
def client(session_maker) -> TestClient:
    async def _override_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _override_session
    app.state.leads = LeadLog()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client: TestClient, run_db: RunDb) -> dict[str, str]:
    run_db(lambda s: ensure_admin_user(s, ADMIN_EMAIL, ADMIN_PASSWORD, "Julia"))
    response = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def add_rows(run_db: RunDb) -> Callable[..., list[Any]]:
    """Persist rows and return them refreshed (ids populated)."""

    def _add(*rows: Any) -> list[Any]:
        async def _insert(session: AsyncSession) -> list[Any]:
            session.add_all(rows)
            await session.flush()
            for row in rows:
                await session.refresh(row)
            return list(rows)

        return run_db(_insert)

    return _add


@pytest.fixture
def open_every_day(add_rows) -> list[Availability]:
    """09:00-12:00 windows for all seven weekdays."""
    return add_rows(*[Availability(day_of_week=d, start_time=time(9), end_time=time(12)) for d in range(7)])


@pytest.fixture
def facial(add_rows) -> Service:
    (service,) = add_rows(
        Service(name="Limpeza de Pele", price=180.0, duration_minutes=60, category="Facial")
    )
    return service


@pytest.fixture
def booking_date() -> date:
    return studio_today() + timedelta(days=7)

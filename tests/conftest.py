"""
Shared fixtures: temp SQLite (aiosqlite) database per test, app bound to it via
dependency override, httpx AsyncClient over ASGITransport.
"""
from typing import Any, Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db import Base, get_session_factory
from app.main import app
from app.models import Company  # noqa: F401  register table


def company_payload(**overrides: Any) -> Dict[str, Any]:
    """Minimal valid create payload."""
    data: Dict[str, Any] = {
        "name": "acme",
        "industry": "Technology",
        "size": "Startup (1-10)",
        "location": {"city": "Pune", "state": "Maharashtra"},
    }
    data.update(overrides)
    return data


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Fresh file-backed SQLite DB (file, not :memory:, so stats can open concurrent sessions)."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'companies.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    """API client against the app, DB overridden to the temp database."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def create_company(client: AsyncClient, **overrides: Any) -> Dict[str, Any]:
    """POST a company and return its data (asserts 201)."""
    resp = await client.post("/api/companies", json=company_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]

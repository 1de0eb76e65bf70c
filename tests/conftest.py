import os

# Settings are read at import time, so point them at SQLite before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ.setdefault("LOG_LEVEL", "warning")

from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from academy.core.database import get_db
from academy.main import app
from academy.models import Base


def money(value) -> Decimal:
    """Monetary fields may serialize as strings or numbers."""
    return Decimal(str(value))


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def client(engine):
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class Factory:
    """Creates records through the API and returns their JSON."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def _post(self, url: str, payload: dict) -> dict:
        response = await self.client.post(url, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    async def klass(self, **overrides) -> dict:
        n = self._next()
        payload = {"name": f"JSS {n}", "level": f"JSS{n}", "category": "Secondary"}
        payload.update(overrides)
        return await self._post("/api/v1/classes/", payload)

    async def student(self, class_id=None, **overrides) -> dict:
        n = self._next()
        payload = {
            "first_name": f"Student{n}",
            "last_name": f"Last{n:03d}",
            "admission_number": f"ADM{n:04d}",
            "class_id": class_id,
            "gender": "Female" if n % 2 else "Male",
        }
        payload.update(overrides)
        return await self._post("/api/v1/students/", payload)

    async def teacher(self, **overrides) -> dict:
        n = self._next()
        payload = {"employee_id": f"EMP{n:03d}", "first_name": f"Teacher{n}", "last_name": "Okafor"}
        payload.update(overrides)
        return await self._post("/api/v1/teachers/", payload)

    async def subject(self, **overrides) -> dict:
        n = self._next()
        payload = {"name": f"Subject {n}", "code": f"SUB{n}", "is_core": True}
        payload.update(overrides)
        return await self._post("/api/v1/subjects/", payload)

    async def assignment(self, subject_id: int, class_id: int, teacher_id: int, **overrides) -> dict:
        payload = {"subject_id": subject_id, "class_id": class_id, "teacher_id": teacher_id}
        payload.update(overrides)
        return await self._post("/api/v1/subjects/assignments", payload)

    async def fee_structure(self, class_id: int, **components) -> dict:
        payload = {"class_id": class_id, **components}
        return await self._post("/api/v1/fees/structures", payload)


@pytest.fixture
def factory(client):
    return Factory(client)

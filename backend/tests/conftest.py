"""
Contacts API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_repository: AsyncMock standing in for ContactRepository
    ├── make_contact: builds row-like objects for service tests
    ├── repository: real ContactRepository on a fresh SQLite file (aiosqlite)
    ├── test_config: Settings with no static directory
    └── test_client: HTTPX AsyncClient talking to an app wired to `repository`
"""

import os
import tempfile
from datetime import datetime
from types import SimpleNamespace

# Override settings for testing BEFORE any app imports, so the module-level
# app in app.main never points at a real server database
_TEST_DIR = tempfile.mkdtemp(prefix="contacts_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/import.db"
os.environ["STATIC_DIR"] = os.path.join(_TEST_DIR, "no-static")
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import create_engine  # noqa: E402
from app.repositories.contact_repository import ContactRepository  # noqa: E402


@pytest.fixture
def mock_repository():
    """
    Provides a mock ContactRepository.

    Usage:
        async def test_get(mock_repository, make_contact):
            mock_repository.get.return_value = make_contact(id=1)
            result = await ContactService(mock_repository).get_contact(1)
    """
    return AsyncMock(spec=ContactRepository)


@pytest.fixture
def make_contact():
    """Factory for objects shaped like a stored Contact row."""

    def _make(**overrides):
        data = {
            "id": 1,
            "name": "Ann Lee",
            "email": "ann@x.com",
            "phone": None,
            "company": None,
            "notes": None,
            "created_at": datetime(2024, 1, 15, 12, 0, 0),
        }
        data.update(overrides)
        return SimpleNamespace(**data)

    return _make


@pytest_asyncio.fixture
async def repository(tmp_path):
    """
    A ContactRepository backed by a fresh SQLite database file.

    The schema is ensured up front, as the lifespan would do on startup.
    """
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
    repo = ContactRepository(engine)
    await repo.ensure_schema()
    yield repo
    await repo.dispose()


@pytest.fixture
def test_config(tmp_path):
    return Settings(static_dir=str(tmp_path / "no-static"), log_level="WARNING")


@pytest_asyncio.fixture
async def test_client(repository, test_config):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app(repository=repository, config=test_config)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

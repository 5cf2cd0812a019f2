# Ensure backend is at sys.path[0] when pytest runs (from repo root or from backend dir)
import sys
from pathlib import Path

_tests_dir = Path(__file__).resolve().parent
_backend = _tests_dir.parent
_str_backend = str(_backend)
if sys.path[0:1] != [_str_backend]:
    sys.path.insert(0, _str_backend)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.config import Settings
from core.database import dispose_database, init_database
from core.dependencies import get_app_settings, get_db_session
from core.security import create_access_token


@pytest.fixture
def settings(tmp_path):
    """Settings pointing the transfer audit files at a per-test directory."""
    return Settings(
        transfers_dir=str(tmp_path / "transfers"),
        default_season="2024",
        jwt_secret="test-secret-key-that-is-long-enough-0123456789",
    )


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh SQLite file database with every table created."""
    manager = await init_database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await manager.create_schema()
    yield manager
    await dispose_database()


@pytest_asyncio.fixture
async def client(db, settings):
    from main import app

    async def override_session():
        async with db.session() as s:
            yield s

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_app_settings] = lambda: settings
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(settings):
    return {"Authorization": f"Bearer {create_access_token({'plan': 'ADMIN'}, settings)}"}


@pytest.fixture
def basic_headers(settings):
    return {"Authorization": f"Bearer {create_access_token({'plan': 'BASIC'}, settings)}"}

import pytest
from fastapi.testclient import TestClient

from cmdb.config import settings
from cmdb.infrastructure.database import (
    close_database,
    create_tables,
    drop_tables,
    get_session_context,
    init_database,
)
from cmdb.inventory.domain import ConfigurationItem
from cmdb.main import app

# File-backed SQLite so concurrent dashboard sessions see the same data
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test_cmdb.db"

WEB_01 = {
    "name": "WEB-01",
    "type": "Server",
    "status": "Active",
    "location": "DC-East",
    "environment": "Production",
}


@pytest.fixture
def client(monkeypatch):
    # The lifespan initialises the engine from settings and creates tables
    monkeypatch.setattr(settings, "database_url", TEST_DATABASE_URL)
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(drop_tables)


@pytest.fixture
async def db_session():
    init_database(TEST_DATABASE_URL)
    await create_tables()
    try:
        async with get_session_context() as session:
            yield session
    finally:
        await drop_tables()
        await close_database()


@pytest.fixture
def create_ci(client):
    def _create(**overrides):
        response = client.post("/api/cis", json={**WEB_01, **overrides})
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


def make_ci(ci_id, name=None, **fields):
    """Plain domain CI for layout and rendering tests."""
    defaults = {
        "name": name or f"CI-{ci_id}",
        "type": "Server",
        "status": "Active",
        "location": "DC-East",
        "environment": "Production",
    }
    defaults.update(fields)
    return ConfigurationItem(id=ci_id, **defaults)

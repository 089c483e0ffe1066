"""
Shared fixtures: a temporary event store and an in-process HTTP client.
"""

import httpx
import pytest

from inventory_ops.config import settings
from inventory_ops.db import SQLiteDatabase
from inventory_ops.dependencies import get_db
from inventory_ops.main import app

from fakes import TEST_SECRET


@pytest.fixture
async def db(tmp_path):
    database = SQLiteDatabase(str(tmp_path / "events.db"))
    await database.initialize()
    yield database
    await database.close()

@pytest.fixture
def webhook_secret(monkeypatch):
    monkeypatch.setattr(settings, "shopify_api_secret", TEST_SECRET)
    return TEST_SECRET

@pytest.fixture
async def http_client(db):
    app.dependency_overrides[get_db] = lambda: db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

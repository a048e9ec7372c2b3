"""
Pytest configuration for the fabrication order API tests.

Environment is set before anything from ``fabtrack`` is imported: the config
module validates it at import time.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

_tmp_dir = tempfile.mkdtemp(prefix="fabtrack-tests-")

os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = str(Path(_tmp_dir) / "test.db")
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["DIRECTORY_SPREADSHEET_ID"] = "directory-sheet"
os.environ.pop("MIRROR_SPREADSHEET_ID", None)
os.environ.pop("GCP_CREDENTIALS", None)
os.environ.pop("GOOGLE_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from fabtrack.core.db import AsyncSessionLocal, Base, engine
from fabtrack.core.state import AppState
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.services.orders.order_store import OrderStore

ADMIN_EMAIL = "admin@pvt.com"
DEFAULT_PASSWORD = "12345678"

ALICE = "alice@example.com"
BOB = "bob@example.com"

DIRECTORY_ROWS = [
    ["Id", "Name", "Email"],
    ["1", "Alice Fabricators", ALICE],
    ["2", "Bob Steelworks", BOB],
    ["3", "", "nameless@example.com"],
]


async def _reset_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


# --------------------
# Google Sheets mocks
# --------------------


def make_sheets_service(rows=None):
    """MagicMock shaped like the Sheets v4 client returned by googleapiclient."""
    service = MagicMock()
    values = service.spreadsheets.return_value.values.return_value
    values.get.return_value.execute.return_value = {
        "values": DIRECTORY_ROWS if rows is None else rows
    }
    values.append.return_value.execute.return_value = {}
    return service


@pytest.fixture
def sheets_service():
    return make_sheets_service()


@pytest.fixture
def directory(sheets_service):
    return UserDirectory("directory-sheet", service=sheets_service)


# --------------------
# Database
# --------------------


@pytest.fixture
async def db_reset():
    await _reset_database()
    yield


@pytest.fixture
async def store(db_reset):
    return OrderStore(AsyncSessionLocal)


# --------------------
# API client
# --------------------


@pytest.fixture
def app_state(directory):
    return AppState(store=OrderStore(AsyncSessionLocal), directory=directory)


@pytest.fixture
def client(app_state, monkeypatch):
    import main

    asyncio.run(_reset_database())
    monkeypatch.setattr(main, "build_app_state", lambda: app_state)

    with TestClient(main.app) as test_client:
        yield test_client


def login(client, email, password=DEFAULT_PASSWORD):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL)


@pytest.fixture
def alice_headers(client):
    return login(client, ALICE)


@pytest.fixture
def bob_headers(client):
    return login(client, BOB)


@pytest.fixture
def order_id(client, admin_headers):
    response = client.post("/orders", json={"client_email": ALICE}, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]

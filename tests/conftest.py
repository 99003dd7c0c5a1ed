"""
Shared pytest fixtures and helpers for the AXII API tests.

This module provides:
- A throwaway SQLite database configured before the app is imported
- One TestClient (and event loop) for the whole session
- Table reset between tests
- Factories for registered users and devices
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

# ─────────────────────────── PATH SETUP ───────────────────────────

TEST_ROOT = Path(__file__).resolve().parent
DATA_DIR = TEST_ROOT / "tmp_data"
DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_FILE = DATA_DIR / "axii_test.db"
if DB_FILE.exists():
    DB_FILE.unlink()

# ─────────────────────────── ENVIRONMENT ───────────────────────────

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_FILE}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEVICE_SWEEP_SECONDS"] = "0"  # No background sweep during tests
os.environ.setdefault("LOG_LEVEL", "WARNING")

from axii.main import app  # noqa: E402
from axii.db.session import async_session, init_models  # noqa: E402

API = "/api/v1"
DEFAULT_PASSWORD = "senha123"

# ─────────────────────────── DATABASE HELPERS ───────────────────────────

async def _reset_tables():
    await init_models(drop=True)


def run_in_app_loop(client: TestClient, func, *args):
    """Run an async helper on the same event loop the app uses."""
    return client.portal.call(func, *args)


async def _with_session(func, *args):
    async with async_session() as db:
        return await func(db, *args)


def run_with_session(client: TestClient, func, *args):
    """Call `func(db, *args)` with a fresh AsyncSession inside the app loop."""
    return run_in_app_loop(client, _with_session, func, *args)

# ─────────────────────────── FIXTURES ───────────────────────────

@pytest.fixture(scope="session")
def app_client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(app_client):
    """TestClient with empty tables."""
    run_in_app_loop(app_client, _reset_tables)
    return app_client

# ─────────────────────────── FACTORIES ───────────────────────────

def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_user(
    client: TestClient,
    name: str = "João Silva",
    email: str = "joao.silva@example.com",
    password: str = DEFAULT_PASSWORD,
) -> Dict[str, Any]:
    """Register a user through the API. Returns token, headers and user payload."""
    response = client.post(f"{API}/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "confirm_password": password,
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return {
        "token": data["token"],
        "headers": auth_headers(data["token"]),
        "user": data["user"],
        "password": password,
    }


def create_device(
    client: TestClient,
    headers: Dict[str, str],
    name: str = "PC-01-LAB",
    ip: str = "192.168.1.100",
    type: str = "computador",
    room: str = "Laboratório 1",
    description: str = "",
    status: Optional[str] = None,
    active: Optional[bool] = None,
) -> Dict[str, Any]:
    """Create a device and optionally force its status / on-off state."""
    response = client.post(f"{API}/devices", headers=headers, json={
        "name": name,
        "ip": ip,
        "type": type,
        "room": room,
        "description": description,
    })
    assert response.status_code == 201, response.text
    device = response.json()["device"]

    if status is not None and status != device["status"]:
        response = client.patch(f"{API}/devices/{device['id']}/status", headers=headers, json={"status": status})
        assert response.status_code == 200, response.text
        device = response.json()["device"]

    if active is not None and active != device["active"]:
        response = client.post(f"{API}/devices/{device['id']}/toggle", headers=headers)
        assert response.status_code == 200, response.text
        device = response.json()["device"]

    return device


def seed_devices(client: TestClient, headers: Dict[str, str]) -> list:
    """The demo inventory shown on the dashboard (one lab and two classrooms)."""
    inventory = [
        dict(name="PC-01-LAB", ip="192.168.1.100", type="computador", room="Laboratório 1", status="online"),
        dict(name="PROJETOR-LAB-01", ip="192.168.1.105", type="projetor", room="Laboratório 1", status="online"),
        dict(name="AR-COND-LAB-01", ip="192.168.1.110", type="ar_condicionado", room="Laboratório 1", status="offline", active=False),
        dict(name="LUZ-LAB-01", ip="192.168.1.115", type="iluminacao", room="Laboratório 1", status="online"),
        dict(name="PROJETOR-SALA-A", ip="192.168.1.101", type="projetor", room="Sala A", status="offline"),
        dict(name="PC-SALA-A-01", ip="192.168.1.120", type="computador", room="Sala A", status="online"),
        dict(name="AR-COND-02", ip="192.168.1.102", type="ar_condicionado", room="Sala B", status="manutencao", active=False),
    ]
    return [create_device(client, headers, **fields) for fields in inventory]

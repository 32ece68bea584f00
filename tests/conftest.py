"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read when borohub is first imported
_tmpdir = tempfile.mkdtemp(prefix="borohub-tests-")
os.environ["SECRET_KEY"] = "test-access-secret"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["REDIS_URL"] = "memory://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["MEDIA_ROOT"] = os.path.join(_tmpdir, "media")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from borohub.database import AsyncSessionLocal, engine
from borohub.main import create_app
from borohub.models import Base
from borohub.services.members import promote_to_admin


async def reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture()
def client():
    with TestClient(create_app()) as c:
        c.portal.call(reset_db)
        yield c


@pytest.fixture()
def register(client):
    """Create a member and return its serialized form."""

    def _register(handle: str, password: str = "secret123", **extra):
        payload = {
            "fullName": extra.pop("full_name", handle.capitalize() + " Tester"),
            "handle": handle,
            "emailAddress": f"{handle}@borohub.io",
            "plainPassword": password,
            **extra,
        }
        res = client.post("/api/auth/initializeAccount", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]["member"]

    return _register


@pytest.fixture()
def login(client):
    """Log in as a member; the session cookies stay on the client."""

    def _login(handle: str, password: str = "secret123"):
        res = client.post("/api/auth/accessAccount", json={"handle": handle, "plainPassword": password})
        assert res.status_code == 200, res.text
        return res.json()["data"]["member"]

    return _login


@pytest.fixture()
def register_admin(client, register):
    """Create a member and promote it the way scripts/create_admin.py does."""

    def _register_admin(handle: str, **extra):
        member = register(handle, **extra)

        async def promote():
            async with AsyncSessionLocal() as db:
                await promote_to_admin(db, handle)

        client.portal.call(promote)
        return {**member, "role": "admin"}

    return _register_admin

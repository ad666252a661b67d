import asyncio
import os

import pytest

# Must be in place before kyi.config is imported
os.environ.setdefault("APP_SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_PATH", "data/test.db")

import kyi.database
from kyi.database import init_db, get_db, create_user


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "kyi.db"
    monkeypatch.setattr(kyi.database, "DATABASE_PATH", path)
    run(init_db())
    return path


@pytest.fixture
def user_id(db_path):
    async def _create():
        db = await get_db()
        try:
            uid = await create_user(db, "kyi@example.com", "x", "Kyi")
            await db.commit()
            return uid
        finally:
            await db.close()
    return run(_create())


@pytest.fixture
def client(db_path):
    from fastapi.testclient import TestClient
    from kyi.main import app
    with TestClient(app) as c:
        yield c

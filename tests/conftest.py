"""
Shared pytest fixtures.

Every test gets its own snapshot file under tmp_path, so no state leaks
between tests and nothing touches ./data.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.base import get_store
from app.main import app
from app.services.store import RecordStore


@pytest.fixture()
def data_path(tmp_path):
    return tmp_path / "data" / "db.json"


@pytest.fixture()
def store(data_path):
    return RecordStore(data_path)


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def dist(tmp_path, monkeypatch):
    """A minimal client build: index.html plus one hashed asset."""
    root = tmp_path / "dist"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text("<!doctype html><div id=root></div>", encoding="utf-8")
    (root / "assets" / "app.js").write_text("console.log('app')", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("outside the root", encoding="utf-8")
    monkeypatch.setattr(settings, "STATIC_DIR", root)
    return root

"""Tests for application wiring: auth middleware and error handlers."""

import importlib

import pytest
from fastapi.testclient import TestClient

from mentormind.config import get_settings
from mentormind.storage.store import JsonFileStore, RecordKind


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "store"


@pytest.fixture
def client(monkeypatch, data_dir):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("APP_SECRET", "s3cret")
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    get_settings.cache_clear()
    import mentormind.main as main_module

    main_module = importlib.reload(main_module)
    with TestClient(main_module.app) as c:
        yield c
    get_settings.cache_clear()


class TestSettings:
    def test_env_overrides(self, monkeypatch, data_dir):
        monkeypatch.setenv("OPENAI_API_KEY", "k")
        monkeypatch.setenv("CHAT_MODEL", "gemini-2.0-flash")
        monkeypatch.setenv("DATA_DIR", str(data_dir))
        get_settings.cache_clear()
        settings = get_settings()
        assert settings.chat_model == "gemini-2.0-flash"
        assert settings.store_dir == data_dir
        assert data_dir.is_dir()
        get_settings.cache_clear()


class TestAuth:
    def test_health_is_open(self, client):
        assert client.get("/api/health").status_code == 200

    def test_secret_required(self, client):
        assert client.get("/api/profile").status_code == 401

    def test_secret_accepted(self, client):
        response = client.get("/api/profile", headers={"X-App-Secret": "s3cret"})
        assert response.status_code == 404


class TestCorruptRecord:
    def test_corrupt_profile_is_server_error(self, client, data_dir):
        store = JsonFileStore(data_dir)
        store.data_dir.mkdir(parents=True, exist_ok=True)
        store.path_for(RecordKind.PROFILE).write_text("{broken")

        response = client.get("/api/profile", headers={"X-App-Secret": "s3cret"})

        assert response.status_code == 500
        assert response.json() == {"error": "Stored data is unreadable", "record": "profile"}

"""Shared fixtures for the safari sync tests."""

import pytest
from fastapi.testclient import TestClient

from safari_sync.config import Config
from safari_sync.main import app
from safari_sync.services import RecordStore, SyncService

TEST_PASSWORD = "test-safari-password"


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "safari-data.json"


@pytest.fixture
def store(data_file):
    store = RecordStore(data_file)
    store.load()
    return store


@pytest.fixture
def service(store):
    return SyncService(store, autosave_interval=300)


@pytest.fixture
def client(data_file, monkeypatch):
    """A TestClient with the app started against a temporary data file."""
    monkeypatch.setattr(Config, "DATA_FILE", data_file)
    monkeypatch.setattr(Config, "PASSWORD", TEST_PASSWORD)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-Password": TEST_PASSWORD}

"""Pytest fixtures for doc_store tests."""

import pytest

from doc_store import MemoryStoreClient, SettingsHolder, StoreSettings, store_settings
from doc_store import log as store_log_module

ROOT_PREFIX = "/projects/demo"


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    """Send doc_store.log into the test's tmp dir and drop global settings afterwards."""
    monkeypatch.setattr(store_log_module, "LOG_FILE", tmp_path / "logs" / "doc_store.log")
    monkeypatch.setattr(store_log_module, "LOG", True)
    monkeypatch.setattr(store_log_module, "first_line", True)
    yield store_log_module.LOG_FILE
    store_settings.reset()


@pytest.fixture
def memory_client():
    return MemoryStoreClient()


@pytest.fixture
def settings(memory_client):
    """A holder configured with the demo root prefix and an in-memory client."""
    return SettingsHolder(StoreSettings(root_prefix=ROOT_PREFIX, store_client=memory_client))

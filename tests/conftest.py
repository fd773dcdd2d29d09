"""
pytest configuration for krishi-mitra tests.

Keeps settings, logging and the environment isolated between tests.
"""

import logging

import pytest

from krishi_mitra.config import clear_settings_cache
from krishi_mitra.notify import Notifier
from krishi_mitra.store import MemoryRecordStore


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Point settings at an empty config and the in-memory store."""
    for var in (
        "KRISHI_LANGUAGE",
        "KRISHI_STORE_BACKEND",
        "KRISHI_MONGO_URI",
        "KRISHI_MONGO_DATABASE",
        "KRISHI_SUPABASE_URL",
        "KRISHI_SUPABASE_KEY",
        "KRISHI_SPEECH_ENABLED",
        "KRISHI_SPEECH_RATE",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("KRISHI_MITRA_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def notifier():
    return Notifier()

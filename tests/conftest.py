"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test artifacts."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture
def config_file(monkeypatch, temp_dir):
    """Point the config store at a file inside temp_dir."""
    path = temp_dir / "notify-mcp" / "config.json"
    monkeypatch.setattr("notify_mcp.config.store.config_path", lambda: path)
    return path


@pytest.fixture
def telegram_payload():
    """A complete current-schema telegram payload."""
    return {
        "apiBaseUrl": "https://api.telegram.org",
        "chatId": "42",
        "token": "abc",
    }

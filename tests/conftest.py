"""
Shared test fixtures for backlog-cli tests.
Isolates configuration so no test reads a real .env or touches the network.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backlog_cli.config import BacklogConfig  # noqa: E402

_BACKLOG_VARS = [
    "BACKLOG_DOMAIN",
    "BACKLOG_API_KEY",
    "BACKLOG_HTTP_TIMEOUT_SECONDS",
    "BACKLOG_HTTP_MAX_RESPONSE_BYTES",
    "BACKLOG_HTTP_LOG",
]


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Every test starts with no Backlog env vars, no .env file and logging off."""
    from backlog_cli import config

    for key in _BACKLOG_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "ENV_PATH", str(tmp_path / "missing.env"))
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_MAX_RESPONSE_BYTES", 5_000_000)


@pytest.fixture
def cfg():
    return BacklogConfig(domain="example.backlog.com", api_key="secret-key", timeout_seconds=5)


@pytest.fixture
def backlog_env(monkeypatch):
    monkeypatch.setenv("BACKLOG_DOMAIN", "example.backlog.com")
    monkeypatch.setenv("BACKLOG_API_KEY", "secret-key")

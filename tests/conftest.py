"""
Shared fixtures for the callback authentication test suite.
"""

import json
from pathlib import Path

import httpx
import pytest

from callback_auth.core.config import DEFAULT_RECORD_FILENAME, ConfigurationService, Settings

CALLBACK_URI = "http://callback.test/auth"

DEFAULT_RECORD = {
    "username": "guest",
    "connections": {
        "fallback": {"protocol": "ssh", "parameters": {"hostname": "bastion"}},
    },
}

CALLBACK_RECORD = {
    "username": "alice",
    "connections": {
        "a": {"protocol": "vnc", "parameters": {"hostname": "h"}},
        "b": {"protocol": "rdp", "parameters": {}},
    },
}


def make_settings(home: Path, **overrides) -> Settings:
    values = {
        "CALLBACK_AUTH_URI": CALLBACK_URI,
        "CALLBACK_AUTH_HOME": str(home),
        "ENVIRONMENT": "test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def write_default_record(home: Path, content) -> Path:
    path = home / DEFAULT_RECORD_FILENAME
    path.write_text(content if isinstance(content, str) else json.dumps(content))
    return path


def make_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler`` instead of the network."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def home(tmp_path) -> Path:
    return tmp_path


@pytest.fixture
def settings(home) -> Settings:
    return make_settings(home)


@pytest.fixture
def config(settings) -> ConfigurationService:
    return ConfigurationService(settings)

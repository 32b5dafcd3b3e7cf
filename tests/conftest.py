"""Pytest configuration and fixtures."""

from __future__ import annotations

import httpx
import pytest
import respx

from httphelper.config import ENV_TIMEOUT, ENV_USER_AGENT, Settings
from httphelper.request import HttpHelper

BASE_URL = "https://api.example.com"

USERS_JSON = {
    "page": 1,
    "data": [
        {"id": 1, "first_name": "Thomas", "last_name": "Anderson"},
        {"id": 2, "first_name": "Trinity", "last_name": ""},
    ],
}

USERS_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<users page=\"1\">"
    '<user id="1"><name>Neo</name></user>'
    '<user id="2"><name>Trinity</name></user>'
    "</users>"
)


@pytest.fixture(autouse=True)
def config_file(tmp_path, monkeypatch):
    """Point the config layer at a temp dir and clear env overrides."""
    config_dir = tmp_path / "config"
    path = config_dir / "config.toml"
    monkeypatch.setattr("httphelper.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("httphelper.config.CONFIG_FILE", path)
    monkeypatch.setattr("httphelper.cli.CONFIG_FILE", path)
    monkeypatch.delenv(ENV_USER_AGENT, raising=False)
    monkeypatch.delenv(ENV_TIMEOUT, raising=False)
    return path


@pytest.fixture()
def mock_api():
    """Activate respx mock for the example API base URL."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as rsps:
        yield rsps


@pytest.fixture()
def helper(mock_api: respx.MockRouter) -> HttpHelper:  # noqa: ARG001
    """HttpHelper with default settings, wired to the mocked transport."""
    return HttpHelper(settings=Settings())


@pytest.fixture()
def client_sessions(monkeypatch) -> dict[str, int]:
    """Count httpx.Client context entries and exits."""
    counts = {"entered": 0, "exited": 0}
    enter, exit_ = httpx.Client.__enter__, httpx.Client.__exit__

    def counting_enter(self):
        counts["entered"] += 1
        return enter(self)

    def counting_exit(self, *args):
        counts["exited"] += 1
        return exit_(self, *args)

    monkeypatch.setattr(httpx.Client, "__enter__", counting_enter)
    monkeypatch.setattr(httpx.Client, "__exit__", counting_exit)
    return counts

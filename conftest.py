"""Root conftest: harness plugin plus shared fixtures available to all test layers."""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

from gymguard_ui.driver_factory import BrowserSession

pytest_plugins = ["pytester", "gymguard_ui.plugin"]


@pytest.fixture()
def mock_session() -> BrowserSession:
    """A BrowserSession whose Playwright handles are all MagicMocks."""
    page = MagicMock(name="page")
    page.url = "http://localhost:3000/login"
    page.screenshot.return_value = b"\x89PNG\r\n\x1a\nfake"
    return BrowserSession(
        playwright=MagicMock(name="playwright"),
        browser=MagicMock(name="browser"),
        context=MagicMock(name="context"),
        page=page,
        headless=True,
        implicit_wait_seconds=5,
        visibility_timeout_seconds=10,
    )


@pytest.fixture()
def clean_env():
    """Clear the headless switches for isolation."""
    with patch.dict(os.environ, clear=False):
        os.environ.pop("headless", None)
        os.environ.pop("HEADLESS", None)
        yield


@pytest.fixture()
def in_tmp_cwd(tmp_path, monkeypatch):
    """Run the test with *tmp_path* as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path

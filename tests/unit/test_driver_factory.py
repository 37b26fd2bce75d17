"""Unit tests for gymguard_ui.driver_factory (no browser required).

``sync_playwright`` is patched so every Playwright object is a MagicMock.
"""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from gymguard_ui.config import RunConfig
from gymguard_ui.driver_factory import (
    HEADLESS_VIEWPORT,
    BrowserSession,
    create_driver,
    ensure_browser_binary,
)
from gymguard_ui.exceptions import DriverStartupError


@pytest.fixture()
def playwright(tmp_path):
    """Patch sync_playwright().start() to return a MagicMock Playwright."""
    executable = tmp_path / "chrome"
    executable.write_text("")
    pw = MagicMock(name="playwright")
    pw.chromium.executable_path = str(executable)
    pw.chromium.name = "chromium"
    with patch("gymguard_ui.driver_factory.sync_playwright") as sync_pw:
        sync_pw.return_value.start.return_value = pw
        yield pw


@pytest.mark.unit
class TestCreateDriver:
    """Verify browser launch options and session wiring."""

    def test_headless_uses_fixed_viewport(self, playwright):
        session = create_driver(RunConfig(base_url="http://x", headless=True))

        playwright.chromium.launch.assert_called_once_with(headless=True)
        browser = playwright.chromium.launch.return_value
        browser.new_context.assert_called_once_with(viewport=HEADLESS_VIEWPORT)
        assert session.headless is True

    def test_headed_maximizes_window(self, playwright):
        session = create_driver(RunConfig(base_url="http://x", headless=False))

        playwright.chromium.launch.assert_called_once_with(
            headless=False, args=["--start-maximized"]
        )
        browser = playwright.chromium.launch.return_value
        browser.new_context.assert_called_once_with(no_viewport=True)
        assert session.headless is False

    def test_implicit_wait_matches_config(self, playwright):
        session = create_driver(RunConfig(base_url="http://x", implicit_wait_seconds=7))

        context = playwright.chromium.launch.return_value.new_context.return_value
        context.set_default_timeout.assert_called_once_with(7000)
        assert session.implicit_wait_seconds == 7

    def test_session_holds_new_page(self, playwright):
        session = create_driver(RunConfig(base_url="http://x", default_visibility_timeout_seconds=3))

        context = playwright.chromium.launch.return_value.new_context.return_value
        assert session.page is context.new_page.return_value
        assert session.playwright is playwright
        assert session.visibility_timeout_seconds == 3

    def test_launch_failure_raises_startup_error_with_cause(self, playwright):
        cause = RuntimeError("Executable doesn't exist")
        playwright.chromium.launch.side_effect = cause

        with pytest.raises(DriverStartupError) as excinfo:
            create_driver(RunConfig(base_url="http://x"))

        assert excinfo.value.__cause__ is cause
        playwright.stop.assert_called_once()

    def test_context_failure_closes_browser(self, playwright):
        browser = playwright.chromium.launch.return_value
        browser.new_context.side_effect = RuntimeError("boom")

        with pytest.raises(DriverStartupError):
            create_driver(RunConfig(base_url="http://x"))

        browser.close.assert_called_once()
        playwright.stop.assert_called_once()

    def test_playwright_start_failure(self):
        with patch("gymguard_ui.driver_factory.sync_playwright") as sync_pw:
            sync_pw.return_value.start.side_effect = RuntimeError("no driver")
            with pytest.raises(DriverStartupError, match="no driver"):
                create_driver(RunConfig(base_url="http://x"))


@pytest.mark.unit
class TestEnsureBrowserBinary:
    """Verify the browser install fallback."""

    def test_no_install_when_executable_present(self, tmp_path):
        executable = tmp_path / "chrome"
        executable.write_text("")
        browser_type = MagicMock(executable_path=str(executable))

        with patch("gymguard_ui.driver_factory.subprocess.run") as run:
            ensure_browser_binary(browser_type)

        run.assert_not_called()

    def test_installs_when_executable_missing(self, tmp_path):
        browser_type = MagicMock(executable_path=str(tmp_path / "missing"))
        browser_type.name = "chromium"

        with patch("gymguard_ui.driver_factory.subprocess.run") as run:
            ensure_browser_binary(browser_type)

        args = run.call_args.args[0]
        assert args[-3:] == ["playwright", "install", "chromium"]
        assert run.call_args.kwargs["check"] is True

    def test_install_failure_becomes_startup_error(self, playwright, tmp_path):
        playwright.chromium.executable_path = str(tmp_path / "missing")
        error = subprocess.CalledProcessError(1, ["playwright", "install"])

        with patch("gymguard_ui.driver_factory.subprocess.run", side_effect=error):
            with pytest.raises(DriverStartupError) as excinfo:
                create_driver(RunConfig(base_url="http://x"))

        assert excinfo.value.__cause__ is error
        playwright.chromium.launch.assert_not_called()
        playwright.stop.assert_called_once()


@pytest.mark.unit
class TestBrowserSession:
    """Verify session helpers and disposal."""

    def test_get_navigates(self, mock_session):
        mock_session.get("http://localhost:3000")
        mock_session.page.goto.assert_called_once_with("http://localhost:3000")

    def test_current_url_delegates_to_page(self, mock_session):
        assert mock_session.current_url == "http://localhost:3000/login"

    def test_screenshot_uses_visibility_timeout_by_default(self, mock_session):
        assert mock_session.screenshot() == b"\x89PNG\r\n\x1a\nfake"
        mock_session.page.screenshot.assert_called_once_with(type="png", timeout=10_000)

    def test_quit_closes_everything_once(self, mock_session):
        mock_session.quit()
        mock_session.quit()

        mock_session.page.close.assert_called_once()
        mock_session.context.close.assert_called_once()
        mock_session.browser.close.assert_called_once()
        mock_session.playwright.stop.assert_called_once()
        assert mock_session.can_screenshot is False

    def test_quit_runs_all_steps_and_reraises_first_error(self, mock_session):
        mock_session.context.close.side_effect = RuntimeError("context gone")
        mock_session.browser.close.side_effect = RuntimeError("browser gone")

        with pytest.raises(RuntimeError, match="context gone"):
            mock_session.quit()

        mock_session.playwright.stop.assert_called_once()

    def test_can_screenshot_while_open(self, mock_session):
        assert isinstance(mock_session, BrowserSession)
        assert mock_session.can_screenshot is True

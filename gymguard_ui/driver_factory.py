"""Browser session creation on top of Playwright's sync API.

``create_driver`` is not thread-safe and keeps no module state: each call
starts its own Playwright driver and returns a session owned by exactly
one test.  Concurrency across tests is the lifecycle's concern.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from playwright.sync_api import (
    Browser,
    BrowserContext,
    BrowserType,
    Page,
    Playwright,
    sync_playwright,
)

from .config import DEFAULT_VISIBILITY_TIMEOUT_SECONDS, RunConfig
from .exceptions import DriverStartupError

logger = logging.getLogger("gymguard.driver")

HEADLESS_VIEWPORT = {"width": 1920, "height": 1080}


@dataclass
class BrowserSession:
    """A running browser with a single page, owned by one test."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    headless: bool
    implicit_wait_seconds: int
    visibility_timeout_seconds: int = DEFAULT_VISIBILITY_TIMEOUT_SECONDS
    closed: bool = False

    @property
    def current_url(self) -> str:
        return self.page.url

    @property
    def can_screenshot(self) -> bool:
        return not self.closed and callable(getattr(self.page, "screenshot", None))

    def get(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        self.page.goto(url)

    def screenshot(self, timeout_seconds: float | None = None) -> bytes:
        """Return PNG bytes of the current viewport."""
        seconds = self.visibility_timeout_seconds if timeout_seconds is None else timeout_seconds
        return self.page.screenshot(type="png", timeout=seconds * 1000)

    def quit(self) -> None:
        """Close page, context, browser and driver.

        Every step runs even if an earlier one fails; the first error is
        re-raised once all of them have been attempted.
        """
        if self.closed:
            return
        self.closed = True
        first_error: Exception | None = None
        for step in (self.page.close, self.context.close, self.browser.close, self.playwright.stop):
            try:
                step()
            except Exception as exc:
                logger.debug("Session cleanup step failed: %s", exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error


def ensure_browser_binary(browser_type: BrowserType) -> None:
    """Install the Playwright browser build if its executable is missing."""
    executable = browser_type.executable_path
    if executable and Path(executable).exists():
        return
    logger.info("Browser executable %s missing, installing %s", executable, browser_type.name)
    subprocess.run(
        [sys.executable, "-m", "playwright", "install", browser_type.name],
        check=True,
        capture_output=True,
        text=True,
    )


def create_driver(cfg: RunConfig) -> BrowserSession:
    """Start Chromium configured from *cfg* and return a fresh session.

    Raises
    ------
    DriverStartupError
        When the browser binary cannot be resolved or the browser fails to
        launch.  Anything already started is shut down first.
    """
    playwright: Playwright | None = None
    browser: Browser | None = None
    try:
        playwright = sync_playwright().start()
        ensure_browser_binary(playwright.chromium)

        if cfg.headless:
            browser = playwright.chromium.launch(headless=True)
            context = browser.new_context(viewport=HEADLESS_VIEWPORT)
        else:
            # A maximized window is only meaningful with a visible browser.
            browser = playwright.chromium.launch(headless=False, args=["--start-maximized"])
            context = browser.new_context(no_viewport=True)

        context.set_default_timeout(cfg.implicit_wait_seconds * 1000)
        page = context.new_page()
    except Exception as exc:
        _shutdown(browser, playwright)
        raise DriverStartupError(f"Failed to start browser session: {exc}") from exc

    logger.info(
        "Browser session started (headless=%s, implicit_wait=%ss)",
        cfg.headless,
        cfg.implicit_wait_seconds,
    )
    return BrowserSession(
        playwright=playwright,
        browser=browser,
        context=context,
        page=page,
        headless=cfg.headless,
        implicit_wait_seconds=cfg.implicit_wait_seconds,
        visibility_timeout_seconds=cfg.default_visibility_timeout_seconds,
    )


def _shutdown(browser: Browser | None, playwright: Playwright | None) -> None:
    if browser is not None:
        try:
            browser.close()
        except Exception as exc:
            logger.debug("Browser close after failed startup raised: %s", exc)
    if playwright is not None:
        try:
            playwright.stop()
        except Exception as exc:
            logger.debug("Playwright stop after failed startup raised: %s", exc)

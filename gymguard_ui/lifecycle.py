"""Per-test browser lifecycle for class-based UI tests.

Subclass :class:`BaseTest` and every test method gets its own browser
session: created and navigated before the body, screenshotted if the body
failed, and always disposed afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Protocol, TypeVar, runtime_checkable

import pytest

from .pages.page_factory import init_page
from .screenshot import capture

if TYPE_CHECKING:
    from .driver_factory import BrowserSession

logger = logging.getLogger("gymguard.lifecycle")

TPage = TypeVar("TPage")

# Reports of each phase ("setup", "call", "teardown") for an item.
PHASE_REPORT_KEY = pytest.StashKey[dict]()
# Path of the screenshot already taken for an item by the failure listener.
SCREENSHOT_KEY = pytest.StashKey[str]()


@runtime_checkable
class SessionHolder(Protocol):
    """Anything that can hand out the browser session of the running test."""

    def get_session(self) -> BrowserSession | None: ...


def call_failed(item: pytest.Item) -> bool:
    report = item.stash.get(PHASE_REPORT_KEY, {}).get("call")
    return report is not None and report.failed


class BaseTest:
    """Base class for UI tests; implements :class:`SessionHolder`."""

    _session: BrowserSession | None = None

    @pytest.fixture(autouse=True)
    def _browser_lifecycle(self, request, run_config, driver_factory, screenshot_dir):
        self._session = driver_factory(run_config)
        if run_config.base_url:
            try:
                self._session.get(run_config.base_url)
            except Exception:
                self._dispose_session()
                raise

        yield

        try:
            if call_failed(request.node) and SCREENSHOT_KEY not in request.node.stash:
                self._capture_failure(request.node.name, screenshot_dir)
        finally:
            self._dispose_session()

    def get_session(self) -> BrowserSession | None:
        return self._session

    def get_driver(self) -> BrowserSession | None:
        """Session of the running test (None outside a test)."""
        return self._session

    def open_page(self, factory: Callable[[BrowserSession], TPage]) -> TPage:
        """Build a page object bound to this test's session."""
        return init_page(self._session, factory)

    def _capture_failure(self, test_name: str, output_dir) -> None:
        try:
            path = capture(self._session, test_name, output_dir=output_dir)
        except Exception:
            logger.exception("Screenshot attempt failed for %s", test_name)
            return
        if path is not None:
            logger.error("Test %s failed. Screenshot saved: %s", test_name, path)
        else:
            logger.error("Test %s failed. Screenshot capture returned null", test_name)

    def _dispose_session(self) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            session.quit()
        except Exception as exc:
            logger.debug("Ignoring error while disposing browser session: %s", exc)

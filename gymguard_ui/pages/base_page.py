"""Base Page Object with wait-then-act primitives.

Implements the Page Object Model (POM) pattern on top of Playwright.
Each page class inherits from BasePage, declares its locators in the
constructor and exposes user-level actions instead of raw selectors.

Locators are lazy: every action re-resolves the selector against the
live DOM, so an element re-rendered between two actions is never stale.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..exceptions import ElementNotVisibleError

if TYPE_CHECKING:
    from ..driver_factory import BrowserSession

logger = logging.getLogger("gymguard.pom")


class BasePage:
    """Abstract base for all page objects."""

    # Subclasses should override with the page-specific path segment.
    path: str = "/"

    def __init__(self, session: BrowserSession) -> None:
        self.session = session
        self.page: Page = session.page
        self.default_timeout: float = session.visibility_timeout_seconds

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def url(self) -> str:
        return self.page.url

    def locator(self, selector: str) -> Locator:
        """Bind *selector* to this page's session without touching the DOM."""
        return self.page.locator(selector)

    # ------------------------------------------------------------------
    # Wait-then-act primitives
    # ------------------------------------------------------------------

    def wait_for_visible(self, element: Locator, seconds: float) -> Locator:
        """Block until *element* is attached and visible.

        Raises
        ------
        ElementNotVisibleError
            When the element is still hidden or absent after *seconds*.
        """
        try:
            element.first.wait_for(state="visible", timeout=seconds * 1000)
        except PlaywrightTimeoutError as exc:
            selector = _describe(element)
            logger.debug("Element '%s' not visible after %ss", selector, seconds)
            raise ElementNotVisibleError(selector, seconds) from exc
        return element

    def click_element(self, element: Locator) -> None:
        self.wait_for_visible(element, self.default_timeout)
        element.first.click()

    def clear_and_type(self, element: Locator, text: str) -> None:
        """Empty an input and type *text* into it key by key."""
        self.wait_for_visible(element, self.default_timeout)
        element.first.clear()
        element.first.press_sequentially(text)

    def get_element_text(self, element: Locator) -> str:
        self.wait_for_visible(element, self.default_timeout)
        return element.first.inner_text()


def _describe(element: Locator) -> str:
    # Locator keeps its selector private; fall back to its repr.
    return str(getattr(element, "_selector", None) or repr(element))

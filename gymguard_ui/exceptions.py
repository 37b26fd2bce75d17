"""Error kinds raised by the UI harness."""

from __future__ import annotations


class HarnessError(Exception):
    """Base exception for all harness failures."""

    pass


class ConfigLoadError(HarnessError):
    """Run configuration is invalid.

    File-level problems (missing, unreadable, malformed) never raise this;
    the loader moves on to the next candidate instead.
    """

    pass


class DriverStartupError(HarnessError):
    """Browser binary resolution or session start failed."""

    pass


class PageInstantiationError(HarnessError):
    """A page object could not be built for a session."""

    def __init__(self, page_name: str, cause: BaseException | None = None) -> None:
        self.page_name = page_name
        self.cause = cause
        message = f"Failed to instantiate page class: {page_name}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class ElementNotVisibleError(HarnessError):
    """Element did not become present and visible in time."""

    def __init__(self, selector: str, timeout_seconds: float) -> None:
        self.selector = selector
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Element '{selector}' not visible after {timeout_seconds}s"
        )


class ScreenshotError(HarnessError):
    """Screenshot capture failed. Never escapes the screenshot helper."""

    pass

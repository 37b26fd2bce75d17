"""gymguard-ui: browser lifecycle, page objects and failure screenshots for UI tests."""

from .config import RunConfig, load_run_config
from .driver_factory import BrowserSession, create_driver
from .exceptions import (
    ConfigLoadError,
    DriverStartupError,
    ElementNotVisibleError,
    HarnessError,
    PageInstantiationError,
    ScreenshotError,
)
from .lifecycle import BaseTest, SessionHolder
from .listener import FailureListener, TestOutcome, TestResult
from .screenshot import capture

__all__ = [
    "BaseTest",
    "BrowserSession",
    "ConfigLoadError",
    "DriverStartupError",
    "ElementNotVisibleError",
    "FailureListener",
    "HarnessError",
    "PageInstantiationError",
    "RunConfig",
    "ScreenshotError",
    "SessionHolder",
    "TestOutcome",
    "TestResult",
    "capture",
    "create_driver",
    "load_run_config",
]

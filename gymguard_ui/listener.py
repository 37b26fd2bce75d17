"""Test outcome listener that screenshots failing tests."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .lifecycle import SessionHolder
from .screenshot import SCREENSHOTS_DIR, capture

logger = logging.getLogger("gymguard.listener")


class TestOutcome(str, enum.Enum):
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TestResult:
    """Outcome of a single test as seen by the listener."""

    __test__ = False  # not a test class, despite the name

    name: str
    outcome: TestOutcome
    failure_reason: str | None = None
    instance: Any = None


class FailureListener:
    """Routes failed tests to the screenshot helper.

    Only failures are acted on; the other events exist so the runner can
    notify every outcome uniformly.  Nothing here ever raises.
    """

    def __init__(self, output_dir: Path | str = SCREENSHOTS_DIR) -> None:
        self.output_dir = output_dir

    def on_test_start(self, result: TestResult) -> None:
        pass

    def on_test_success(self, result: TestResult) -> None:
        pass

    def on_test_skipped(self, result: TestResult) -> None:
        pass

    def on_test_failure(self, result: TestResult) -> str | None:
        session = self._session_of(result.instance)
        try:
            path = capture(session, result.name, output_dir=self.output_dir)
        except Exception:
            logger.exception("Failed to capture screenshot for test %s", result.name)
            return None
        if path is not None:
            logger.error("Test failed. Screenshot saved: %s", path)
        else:
            logger.error("Test failed. Screenshot capture returned null for: %s", result.name)
        return path

    def notify(self, result: TestResult) -> str | None:
        """Dispatch *result* to the handler for its outcome."""
        if result.outcome is TestOutcome.FAILED:
            return self.on_test_failure(result)
        if result.outcome is TestOutcome.SKIPPED:
            self.on_test_skipped(result)
        else:
            self.on_test_success(result)
        return None

    @staticmethod
    def _session_of(instance: Any):
        if not isinstance(instance, SessionHolder):
            return None
        try:
            return instance.get_session()
        except Exception as exc:
            logger.debug("Could not obtain browser session from test instance: %s", exc)
            return None

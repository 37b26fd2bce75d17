"""pytest plugin: options, markers, session fixtures and the failure listener hook.

Enable it from a root ``conftest.py`` with
``pytest_plugins = ["gymguard_ui.plugin"]``.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import pytest

from .config import load_run_config
from .driver_factory import create_driver
from .lifecycle import PHASE_REPORT_KEY, SCREENSHOT_KEY
from .listener import FailureListener, TestOutcome, TestResult
from .screenshot import SCREENSHOTS_DIR
from .utils.logging_utils import configure_json_logging

_LISTENER_KEY = pytest.StashKey[FailureListener]()
_STANDARD_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Options and markers
# ---------------------------------------------------------------------------

def pytest_addoption(parser):
    group = parser.getgroup("gymguard", "UI test harness")
    group.addoption(
        "--headless",
        action="store_true",
        default=False,
        help="Run the browser headless (also enabled by headless=true in the environment).",
    )
    group.addoption(
        "--no-failure-listener",
        action="store_true",
        default=False,
        help="Do not screenshot failures from the report hook; teardown still does.",
    )
    group.addoption(
        "--screenshot-dir",
        default=str(SCREENSHOTS_DIR),
        help="Directory failure screenshots are written to (default: screenshots).",
    )
    group.addoption(
        "--json-logs",
        action="store_true",
        default=False,
        help="Route harness logging through a Loguru JSON sink on stderr.",
    )


def pytest_configure(config):
    """Register custom markers so --strict-markers does not complain."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Lifecycle tests driven through pytester")
    config.addinivalue_line("markers", "e2e: End-to-end tests against a running application")

    if config.getoption("json_logs"):
        configure_json_logging(json_log_level(config.getoption("log_level")))
    if not config.getoption("no_failure_listener"):
        config.stash[_LISTENER_KEY] = FailureListener(config.getoption("screenshot_dir"))


def json_log_level(raw: str | None) -> str | int:
    """Normalize pytest's ``--log-level`` (a name or a number) for Loguru."""
    if not raw:
        return "INFO"
    value = str(raw).strip()
    if not value.isdigit():
        return value.upper()
    number = int(value)
    name = logging.getLevelName(number)
    # Numbers without a standard name (e.g. 0, 15) stay numeric.
    return name if name in _STANDARD_LEVELS else number


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def run_config(request):
    """Run configuration resolved from the pytest rootdir."""
    cfg = load_run_config(request.config.rootpath)
    if request.config.getoption("headless") and not cfg.headless:
        cfg = dataclasses.replace(cfg, headless=True)
    return cfg


@pytest.fixture
def driver_factory():
    """Callable turning a RunConfig into a BrowserSession; override to fake it."""
    return create_driver


@pytest.fixture
def screenshot_dir(request) -> Path:
    return Path(request.config.getoption("screenshot_dir"))


# ---------------------------------------------------------------------------
# Outcome reporting
# ---------------------------------------------------------------------------

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(PHASE_REPORT_KEY, {})[report.when] = report

    if report.when != "call":
        return
    listener = item.config.stash.get(_LISTENER_KEY, None)
    if listener is None:
        return
    path = listener.notify(_to_result(item, report))
    if path is not None:
        item.stash[SCREENSHOT_KEY] = path


def _to_result(item, report) -> TestResult:
    if report.failed:
        outcome = TestOutcome.FAILED
    elif report.skipped:
        outcome = TestOutcome.SKIPPED
    else:
        outcome = TestOutcome.PASSED
    return TestResult(
        name=item.name,
        outcome=outcome,
        failure_reason=(report.longreprtext or None) if report.failed else None,
        instance=getattr(item, "instance", None),
    )

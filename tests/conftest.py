"""Test-layer conftest: helpers for faking Playwright locators."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture()
def locators(mock_session):
    """Make ``page.locator(selector)`` return one MagicMock per selector.

    Returns the dict of created locators keyed by selector so tests can
    assert on the calls made against a specific element.
    """
    created: dict[str, MagicMock] = {}

    def _locator(selector):
        if selector not in created:
            loc = MagicMock(name=f"locator[{selector}]")
            loc._selector = selector
            created[selector] = loc
        return created[selector]

    mock_session.page.locator.side_effect = _locator
    return created

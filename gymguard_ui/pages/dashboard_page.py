"""Dashboard page object."""

from __future__ import annotations

from .base_page import BasePage


class DashboardPage(BasePage):
    """Landing screen after a successful login.

    Carries no actions yet; it exists so ``LoginPage.login`` hands back a
    page bound to the same session.
    """

    path = "/dashboard"

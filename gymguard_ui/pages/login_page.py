"""Login page object."""

from __future__ import annotations

from .base_page import BasePage
from .dashboard_page import DashboardPage
from .page_factory import init_page
from ..exceptions import ElementNotVisibleError


class LoginPage(BasePage):
    """Page object for the login/authentication screen.

    Selectors use the stable ``data-test-id`` attributes emitted by the
    application; they are part of its compatibility surface.
    """

    path = "/login"

    EMAIL_INPUT = "[data-test-id='input--login--email'] input"
    PASSWORD_INPUT = "[data-test-id='input--login--password'] input"
    SUBMIT_BUTTON = "[data-test-id='button--login--submit']"
    # The MUI Alert renders with role="alert" inside the form.
    ERROR_MESSAGE = "[role='alert']"

    def __init__(self, session) -> None:
        super().__init__(session)
        self.email_input = self.locator(self.EMAIL_INPUT)
        self.password_input = self.locator(self.PASSWORD_INPUT)
        self.submit_button = self.locator(self.SUBMIT_BUTTON)
        self.error_message = self.locator(self.ERROR_MESSAGE)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> DashboardPage:
        """Fill both fields and submit.

        Does not wait for the dashboard to load; callers assert on it.
        """
        self.clear_and_type(self.email_input, email)
        self.clear_and_type(self.password_input, password)
        self.click_element(self.submit_button)
        return init_page(self.session, DashboardPage)

    def get_error_message(self) -> str:
        """Return the alert text, raising ElementNotVisibleError if none shows."""
        return self.get_element_text(self.error_message)

    def try_get_error_message(self, seconds: float | None = None) -> str | None:
        timeout = self.default_timeout if seconds is None else seconds
        try:
            self.wait_for_visible(self.error_message, timeout)
        except ElementNotVisibleError:
            return None
        return self.error_message.first.inner_text()

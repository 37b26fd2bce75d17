"""Page Object Model classes for the authentication flow."""

from .base_page import BasePage
from .dashboard_page import DashboardPage
from .login_page import LoginPage
from .page_factory import init_page

__all__ = ["BasePage", "DashboardPage", "LoginPage", "init_page"]

"""
================================================================================
Login Page Object (SauceDemo)
================================================================================

Login form of https://www.saucedemo.com.

Ready when the username, password and login controls are visible and the
document title is "Swag Labs". A successful login hands over to
InventoryPage, whose own readiness gate confirms the navigation.

================================================================================
"""

from __future__ import annotations

import os
from typing import Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.conditions import title_contains
from testsuites.ui_testing.framework.locators import by_id, css, data_test, group
from testsuites.ui_testing.framework.page_base import BasePage

from .inventory_page import InventoryPage


# Element map
USERNAME_INPUT = data_test("username", name="username_input")
PASSWORD_INPUT = data_test("password", name="password_input")
LOGIN_BUTTON = group(
    "login_button",
    data_test("login-button"),
    by_id("login-button"),
    css("input[type='submit']"),
)
ERROR_MESSAGE = data_test("error", name="error_message")

DEFAULT_USERNAME = "standard_user"
DEFAULT_PASSWORD = "secret_sauce"


class LoginPage(BasePage):
    """SauceDemo login page."""

    URL_PATH = "/"
    PAGE_TITLE = "Swag Labs"
    CRITICAL_ELEMENTS = (USERNAME_INPUT, PASSWORD_INPUT, LOGIN_BUTTON)

    def additional_readiness_conditions(self):
        return [title_contains(self.PAGE_TITLE)]

    @allure.step("Enter username '{username}'")
    def enter_username(self, username: str) -> "LoginPage":
        self.type_text(USERNAME_INPUT, username)
        return self

    @allure.step("Enter password")
    def enter_password(self, password: str) -> "LoginPage":
        self.type_text(PASSWORD_INPUT, password, sensitive=True)
        return self

    def submit(self) -> None:
        self.click(LOGIN_BUTTON)

    def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> InventoryPage:
        """
        Log in and wait for the inventory page.

        Args:
            username: Defaults to ``UI_USERNAME`` (SauceDemo standard_user)
            password: Defaults to ``UI_PASSWORD``

        Returns:
            Ready InventoryPage

        Raises:
            PageNotReadyError: If the inventory page does not become ready
        """
        username = username or os.getenv("UI_USERNAME", DEFAULT_USERNAME)
        password = password or os.getenv("UI_PASSWORD", DEFAULT_PASSWORD)

        with allure.step(f"Login as '{username}'"):
            self.enter_username(username).enter_password(password).submit()
            logger.info(f"Submitted login form for '{username}'")
            inventory = self.switch_to(InventoryPage)
            inventory.assert_loaded()
        return inventory

    def login_expecting_error(self, username: str, password: str) -> str:
        """Submit credentials that should be rejected; returns the error text."""
        with allure.step(f"Login as '{username}' expecting an error"):
            self.enter_username(username).enter_password(password).submit()
            return self.get_error_message()

    def get_error_message(self) -> str:
        return self.get_text(ERROR_MESSAGE)

    def has_error(self) -> bool:
        return self.is_visible(ERROR_MESSAGE)


__all__ = [
    "LoginPage",
    "USERNAME_INPUT",
    "PASSWORD_INPUT",
    "LOGIN_BUTTON",
    "ERROR_MESSAGE",
]

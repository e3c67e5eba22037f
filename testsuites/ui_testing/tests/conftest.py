"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests, providing fixtures for browser
management, page objects, visual checks, and test setup/teardown.

Key Features:
- Settings loaded once per session from config.yaml + environment
- One WebDriver session per test (BrowserManager)
- Page Object fixtures
- Screenshot capture on failure

Live browser tests only run with ``--run-ui``.

================================================================================
"""

from typing import Generator

import allure
import pytest
from loguru import logger

from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.retry import RetryExecutor
from testsuites.ui_testing.framework.settings import Settings, load_settings
from testsuites.ui_testing.framework.visual_service import VisualTestService
from testsuites.ui_testing.pages.inventory_page import InventoryPage
from testsuites.ui_testing.pages.login_page import LoginPage


# ================================================================================
# Settings Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Session-scoped typed settings."""
    return load_settings()


@pytest.fixture(scope="session")
def retry_executor(settings: Settings) -> RetryExecutor:
    """Retry executor configured from ``retry_policy``."""
    return RetryExecutor.from_settings(settings.retry_policy)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="function")
def driver(settings: Settings) -> Generator:
    """
    Function-scoped WebDriver fixture.

    Creates a new browser session for each test, providing isolation.
    """
    manager = BrowserManager(settings.browser, settings.grid)
    driver = manager.create_driver()
    yield driver
    manager.quit_safely()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(driver, settings: Settings, retry_executor: RetryExecutor) -> LoginPage:
    """
    Provides an opened, ready LoginPage.

    Use this fixture for tests that interact with the login page.
    """
    page = LoginPage(driver, retry=retry_executor, framework=settings.framework)
    page.open()
    return page


@pytest.fixture
def inventory_page(login_page: LoginPage) -> InventoryPage:
    """Provides InventoryPage with an authenticated session."""
    return login_page.login()


@pytest.fixture
def visual_service(settings: Settings) -> VisualTestService:
    """Visual assertion service bound to the configured baseline directory."""
    return VisualTestService(settings.visual, settings.framework)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Automatically takes a screenshot when a UI test fails and attaches
    it to the Allure report.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    funcargs = getattr(item, "funcargs", {})
    page = funcargs.get("inventory_page") or funcargs.get("login_page")
    try:
        if page is not None:
            page.capture_failure(item.name)
        elif "driver" in funcargs:
            allure.attach(
                funcargs["driver"].get_screenshot_as_png(),
                name="failure_screenshot",
                attachment_type=allure.attachment_type.PNG,
            )
    except Exception as e:
        # Log but don't fail if screenshot capture fails
        logger.warning(f"Failed to capture screenshot on failure: {e}")


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def test_data():
    """
    Provides common test data for UI tests.
    """
    return {
        "locked_out_user": {
            "username": "locked_out_user",
            "password": "secret_sauce",
        },
        "invalid_user": {
            "username": "invalid_user",
            "password": "wrong_password",
        },
    }

"""
================================================================================
Browser Manager
================================================================================

WebDriver lifecycle management for UI automation.

Features:
    - Chrome, Firefox and Edge sessions from typed BrowserSettings
    - Local drivers (Selenium Manager) or a remote Selenium Grid
    - Headless mode, fixed window size, page-load timeout
    - Safe teardown that never masks the test outcome

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger
from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.remote.webdriver import WebDriver

from .exceptions import BrowserSetupError
from .settings import (
    BrowserSettings,
    BrowserType,
    ChromiumExtension,
    FirefoxExtension,
    SeleniumGridSettings,
    load_settings,
)


# Arguments applied to every Chromium session for stability in CI containers
CHROMIUM_DEFAULT_ARGUMENTS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-notifications",
    "--disable-extensions",
)

FIREFOX_DEFAULT_PREFERENCES = {
    "dom.webnotifications.enabled": False,
    "media.volume_scale": "0.0",
}


class BrowserManager:
    """
    Creates and disposes of one WebDriver session.

    Usage:
        with BrowserManager(settings.browser, settings.grid) as driver:
            driver.get("https://www.saucedemo.com")

        # Or explicitly
        manager = BrowserManager(settings.browser)
        driver = manager.create_driver()
        ...
        manager.quit_safely()
    """

    def __init__(
        self,
        settings: Optional[BrowserSettings] = None,
        grid: Optional[SeleniumGridSettings] = None,
    ):
        """
        Initialize browser manager.

        Args:
            settings: Browser settings (loaded from configuration if None)
            grid: Selenium Grid settings (loaded from configuration if None);
                local drivers when disabled
        """
        if settings is None or grid is None:
            configured = load_settings()
            settings = settings or configured.browser
            grid = grid or configured.grid
        self.settings = settings
        self.grid = grid
        self._driver: Optional[WebDriver] = None

    def __enter__(self) -> WebDriver:
        return self.create_driver()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.quit_safely()

    @property
    def driver(self) -> Optional[WebDriver]:
        """Current driver, None before create_driver() or after quit."""
        return self._driver

    @property
    def is_remote(self) -> bool:
        return self.grid.enabled

    # =========================================================================
    # Options
    # =========================================================================

    def build_options(self) -> Any:
        """Vendor-specific options object for the configured browser."""
        browser_type = self.settings.browser_type
        if browser_type == BrowserType.FIREFOX:
            return self._firefox_options()
        if browser_type == BrowserType.EDGE:
            return self._chromium_options(EdgeOptions())
        return self._chromium_options(ChromeOptions())

    def _chromium_options(self, options: Any) -> Any:
        settings = self.settings
        extension = settings.extension
        assert isinstance(extension, ChromiumExtension)

        if settings.headless:
            options.add_argument("--headless=new")
        options.add_argument(f"--window-size={settings.window_width},{settings.window_height}")
        for argument in CHROMIUM_DEFAULT_ARGUMENTS + tuple(settings.arguments):
            if argument not in options.arguments:
                options.add_argument(argument)

        if extension.binary_location:
            options.binary_location = extension.binary_location
        for name, value in extension.experimental_options.items():
            options.add_experimental_option(name, value)

        options.set_capability("pageLoadStrategy", "normal")
        return options

    def _firefox_options(self) -> FirefoxOptions:
        settings = self.settings
        extension = settings.extension
        assert isinstance(extension, FirefoxExtension)

        options = FirefoxOptions()
        if settings.headless:
            options.add_argument("-headless")
        options.add_argument(f"--width={settings.window_width}")
        options.add_argument(f"--height={settings.window_height}")
        for argument in settings.arguments:
            options.add_argument(argument)

        if extension.binary_location:
            options.binary_location = extension.binary_location
        for name, value in {**FIREFOX_DEFAULT_PREFERENCES, **extension.preferences}.items():
            options.set_preference(name, value)

        options.set_capability("pageLoadStrategy", "normal")
        return options

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create_driver(self) -> WebDriver:
        """
        Start a WebDriver session.

        Returns:
            Configured WebDriver instance

        Raises:
            BrowserSetupError: If the session cannot be created
        """
        browser = self.settings.browser_type.value
        target = f"grid {self.grid.url}" if self.is_remote else "local driver"
        logger.info(f"Creating {browser} browser via {target} (headless={self.settings.headless})")

        try:
            options = self.build_options()
            if self.is_remote:
                driver = webdriver.Remote(command_executor=self.grid.url, options=options)
            elif self.settings.browser_type == BrowserType.FIREFOX:
                driver = webdriver.Firefox(options=options)
            elif self.settings.browser_type == BrowserType.EDGE:
                driver = webdriver.Edge(options=options)
            else:
                driver = webdriver.Chrome(options=options)
        except Exception as e:
            raise BrowserSetupError(f"Failed to create {browser} browser via {target}: {e}") from e

        self._driver = driver
        try:
            driver.set_page_load_timeout(self.settings.page_load_timeout)
            driver.set_window_size(self.settings.window_width, self.settings.window_height)
        except Exception as e:
            self.quit_safely()
            raise BrowserSetupError(f"Failed to configure {browser} session: {e}") from e

        logger.info(f"{browser} browser created successfully")
        return driver

    def quit_safely(self) -> None:
        """Quit the session; errors are logged, never raised."""
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            driver.quit()
            logger.debug("Browser closed")
        except Exception as e:
            logger.warning(f"Error while quitting browser: {e}")


__all__ = [
    "BrowserManager",
    "CHROMIUM_DEFAULT_ARGUMENTS",
    "FIREFOX_DEFAULT_PREFERENCES",
]

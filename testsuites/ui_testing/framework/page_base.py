"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Two-phase construction: building a page never waits; ``ensure_ready()``
      runs the readiness gate and returns a ReadinessResult, and
      ``assert_loaded()`` raises PageNotReadyError from it
    - Retry-wrapped element interactions
    - Explicit waits bound to the page timeout
    - Screenshot and failure capture utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

import allure
from loguru import logger
from selenium.webdriver.remote.webelement import WebElement

from uitest_tools.common import ensure_directory
from uitest_tools.report_tools import attach_png, attach_text

from .conditions import visibility_of_element
from .exceptions import WaitTimeoutError
from .locators import CriticalElement, Locator
from .performance_timer import PerformanceTimer
from .readiness import PageReadinessGate, ReadinessResult
from .retry import RetryExecutor
from .settings import FrameworkSettings, load_settings
from .wait_helpers import WaitConfig, Waiter


SCREENSHOT_SUBDIR = "screenshots"

P = TypeVar("P", bound="BasePage")


class BasePage:
    """
    Base class for all page objects.

    Subclasses declare where the page lives and which elements must be
    visible before the page counts as ready.

    Interactions (``click``, ``type_text``, ``get_text``) retry a ``find``
    that already waits up to ``timeout``. While TIMEOUT is a retryable kind,
    a missing element blocks for about max_attempts * timeout plus backoff.
    Pass a smaller ``timeout`` to ``find`` or drop TimeoutException from
    ``retry_policy.retryable_exception_full_names`` to shorten it.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/"
            CRITICAL_ELEMENTS = (USERNAME, PASSWORD, LOGIN_BUTTON)

            def login(self, username: str, password: str) -> None:
                self.type_text(USERNAME, username)
                self.type_text(PASSWORD, password, sensitive=True)
                self.click(LOGIN_BUTTON)

        page = LoginPage(driver).open()   # navigate + assert_loaded
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""
    CRITICAL_ELEMENTS: Sequence[CriticalElement] = ()

    def __init__(
        self,
        driver: Any,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry: Optional[RetryExecutor] = None,
        framework: Optional[FrameworkSettings] = None,
    ):
        """
        Initialize page object. Does not touch the browser.

        Args:
            driver: Selenium WebDriver
            base_url: Application base URL (framework.base_url if None)
            timeout: Page-scoped explicit wait timeout in seconds
            retry: Retry executor for interactions (retry_policy from
                configuration if None)
            framework: Framework settings (loaded from configuration if None)
        """
        self.driver = driver
        if framework is None or retry is None:
            configured = load_settings()
            framework = framework or configured.framework
            retry = retry or RetryExecutor.from_settings(configured.retry_policy)
        self.framework = framework
        self.base_url = (base_url or self.framework.base_url).rstrip("/")
        self.timeout = self.framework.default_timeout if timeout is None else timeout
        self.waiter = Waiter(driver, WaitConfig(timeout=self.timeout, poll_interval=self.framework.poll_interval))
        self.retry = retry
        self.page_name = type(self).__name__
        self._readiness: Optional[ReadinessResult] = None

        logger.debug(f"Instantiated {self.page_name}. Readiness is checked by ensure_ready()")

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    @property
    def readiness(self) -> Optional[ReadinessResult]:
        """Result of the last readiness check, None if never checked."""
        return self._readiness

    @property
    def is_ready(self) -> bool:
        return self._readiness is not None and self._readiness.ready

    # =========================================================================
    # Navigation and Readiness
    # =========================================================================

    def navigate(self) -> "BasePage":
        """Navigate to this page. Readiness must be re-checked afterwards."""
        with allure.step(f"Navigate to {self.URL_PATH}"):
            self.driver.get(self.url)
            self._readiness = None
            logger.debug(f"Navigated to: {self.url}")
        return self

    def additional_readiness_conditions(self) -> List[Callable[[Any], Any]]:
        """Extra predicates that must all hold for the page to be ready."""
        return []

    def ensure_ready(self) -> ReadinessResult:
        """
        Run the readiness gate and return its outcome.

        The duration is logged and attached to Allure, judged against
        ``framework.expected_page_load_ms`` when the page is ready.
        """
        gate = PageReadinessGate(self.driver, timeout=self.timeout, poll_interval=self.framework.poll_interval)

        with allure.step(f"Check that page '{self.page_name}' is loaded and ready"):
            with PerformanceTimer(f"PageLoad_{self.page_name}", extra={"page_type": self.page_name}) as timer:
                result = gate.check(
                    self.page_name,
                    list(self.CRITICAL_ELEMENTS),
                    self.additional_readiness_conditions(),
                )
                timer.stop_and_log(
                    attach_to_allure=True,
                    expected_max_ms=self.framework.expected_page_load_ms if result.ready else None,
                )

        self._readiness = result
        return result

    def assert_loaded(self) -> "BasePage":
        """
        Require the page to be ready.

        Raises:
            PageNotReadyError: If the readiness gate fails
        """
        self.ensure_ready().raise_for_failure()
        return self

    def open(self) -> "BasePage":
        """Navigate to the page and require it to be ready."""
        return self.navigate().assert_loaded()

    def switch_to(self, page_cls: Type[P]) -> P:
        """Page object for the next page of a flow, sharing this page's session and policies."""
        return page_cls(
            self.driver,
            base_url=self.base_url,
            timeout=self.timeout,
            retry=self.retry,
            framework=self.framework,
        )

    # =========================================================================
    # Element Interactions
    # =========================================================================

    def wait_for(
        self,
        condition: Callable[[Any], Any],
        timeout: Optional[float] = None,
        description: Optional[str] = None,
    ) -> Any:
        """Wait for any condition using the page timeout."""
        return self.waiter.until(condition, timeout=timeout, description=description)

    def find(self, locator: CriticalElement, timeout: Optional[float] = None) -> WebElement:
        """
        Wait for a locator (or locator group) to resolve to a visible element.

        Raises:
            WaitTimeoutError: If nothing visible matches within the timeout
        """
        logger.trace(f"{self.page_name} finding element: {locator}")
        return self.waiter.until(
            visibility_of_element(locator),
            timeout=timeout,
            description=f"{self.page_name}: visible {locator}",
        )

    def find_all(self, locator: Locator) -> List[WebElement]:
        """All elements currently matching ``locator`` (no wait)."""
        return self.driver.find_elements(*locator)

    def click(self, locator: CriticalElement) -> None:
        """Click an element, retrying transient failures."""
        with allure.step(f"Click: {locator}"):
            self.retry.execute(
                lambda: self.find(locator).click(),
                description=f"{self.page_name}: click {locator}",
            )

    def type_text(
        self,
        locator: CriticalElement,
        text: str,
        clear_first: bool = True,
        sensitive: bool = False,
    ) -> None:
        """
        Type into an input, retrying transient failures.

        Args:
            locator: Input element
            text: Text to type
            clear_first: Clear the field before typing
            sensitive: Mask the value in the report
        """
        shown = "*" * len(text) if sensitive else text

        def _type() -> None:
            element = self.find(locator)
            if clear_first:
                element.clear()
            element.send_keys(text)

        with allure.step(f"Fill {locator}: {shown}"):
            self.retry.execute(_type, description=f"{self.page_name}: type into {locator}")

    def get_text(self, locator: CriticalElement) -> str:
        """Visible text of an element, retrying transient failures."""
        return self.retry.execute(
            lambda: self.find(locator).text,
            description=f"{self.page_name}: read text of {locator}",
        )

    def is_visible(self, locator: CriticalElement, timeout: float = 0) -> bool:
        """
        Check if element is visible.

        Args:
            locator: Element to check
            timeout: How long to wait for it; 0 checks once

        Returns:
            True if visible
        """
        try:
            self.find(locator, timeout=timeout)
            return True
        except WaitTimeoutError:
            return False

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    def save_screenshot(self, name: str, attach_to_allure: bool = True) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        screenshot_dir = ensure_directory(Path(self.framework.artifacts_dir) / SCREENSHOT_SUBDIR)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filepath = screenshot_dir / f"{name}_{timestamp}.png"

        png = self.driver.get_screenshot_as_png()
        filepath.write_bytes(png)

        if attach_to_allure:
            attach_png(png, name=name)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Last readiness outcome
        """
        with allure.step("Capture failure details"):
            self.save_screenshot(f"failure_{test_name}", attach_to_allure=True)
            attach_text(self.driver.current_url, name="Current URL")
            if self._readiness is not None and self._readiness.error is not None:
                attach_text(str(self._readiness.error), name="Readiness failure")


__all__ = [
    "BasePage",
]

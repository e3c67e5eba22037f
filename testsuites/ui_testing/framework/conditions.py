"""
================================================================================
Expected Conditions
================================================================================

Reusable predicates for the wait engine. Each factory returns a callable
taking the driver and returning a truthy value (often the element) when the
condition holds, or a falsy value to keep polling.

Driver errors raised inside a predicate are handled by the Waiter, except in
all_of / any_of where a failing sub-condition counts as false for that poll.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Union

from loguru import logger
from selenium.common.exceptions import StaleElementReferenceException, WebDriverException
from selenium.webdriver.remote.webelement import WebElement

from .locators import CriticalElement, Locator, LocatorGroup


Condition = Callable[[Any], Any]


def document_is_ready() -> Condition:
    """True once ``document.readyState`` is 'complete'."""

    def _document_is_ready(driver: Any) -> bool:
        state = driver.execute_script("return document.readyState;")
        return str(state or "").lower() == "complete"

    return _document_is_ready


def title_contains(text: str) -> Condition:
    """Returns the page title once it contains ``text``."""

    def _title_contains(driver: Any) -> Optional[str]:
        title = driver.title or ""
        return title if text in title else None

    return _title_contains


def _first_displayed(driver: Any, locator: Locator) -> Optional[WebElement]:
    for element in driver.find_elements(*locator):
        if element.is_displayed():
            return element
    return None


def visibility_of(locator: Locator) -> Condition:
    """Returns the first visible element matching ``locator``."""

    def _visibility_of(driver: Any) -> Optional[WebElement]:
        return _first_displayed(driver, locator)

    _visibility_of.__name__ = f"visibility of {locator}"
    return _visibility_of


def visibility_of_any(locator_group: LocatorGroup) -> Condition:
    """
    Returns the first visible element of a LocatorGroup.

    Members are tried in order; a match on a fallback is logged as a
    warning so the primary selector can be fixed.
    """

    def _visibility_of_any(driver: Any) -> Optional[WebElement]:
        for index, locator in enumerate(locator_group):
            element = _first_displayed(driver, locator)
            if element is None:
                continue
            if index > 0:
                logger.warning(
                    f"Element '{locator_group.name}' used fallback #{index}: {locator} "
                    f"(primary {locator_group.primary} not visible)"
                )
            return element
        return None

    _visibility_of_any.__name__ = f"visibility of any {locator_group}"
    return _visibility_of_any


def visibility_of_element(element: CriticalElement) -> Condition:
    """Visibility condition for a Locator or a LocatorGroup."""
    if isinstance(element, LocatorGroup):
        return visibility_of_any(element)
    return visibility_of(element)


def invisibility_of(locator: Locator) -> Condition:
    """True once no element matching ``locator`` is displayed."""

    def _invisibility_of(driver: Any) -> bool:
        return _first_displayed(driver, locator) is None

    return _invisibility_of


def element_attribute_to_be(locator: Locator, attribute: str, expected: str) -> Condition:
    """Returns the element once ``attribute`` equals ``expected``."""

    def _attribute_to_be(driver: Any) -> Optional[WebElement]:
        element = driver.find_element(*locator)
        return element if element.get_attribute(attribute) == expected else None

    return _attribute_to_be


def element_count_to_be(locator: Locator, expected_count: int) -> Condition:
    """
    Returns the matching elements once exactly ``expected_count`` exist.

    For an expected count of 0 the condition returns True.
    """

    def _count_to_be(driver: Any) -> Union[List[WebElement], bool, None]:
        elements = driver.find_elements(*locator)
        if len(elements) != expected_count:
            return None
        return elements if elements else True

    return _count_to_be


def element_count_at_least(locator: Locator, min_count: int) -> Condition:
    """Returns the matching elements once at least ``min_count`` exist (True if none are required)."""

    def _count_at_least(driver: Any) -> Union[List[WebElement], bool, None]:
        elements = driver.find_elements(*locator)
        if len(elements) < min_count:
            return None
        return elements if elements else True

    return _count_at_least


def element_text_to_change_from(locator: Locator, initial_text: str) -> Condition:
    """True once the element's text differs from ``initial_text``."""

    def _text_changed(driver: Any) -> bool:
        return driver.find_element(*locator).text != initial_text

    return _text_changed


def element_to_be_stale(element: WebElement) -> Condition:
    """True once ``element`` is detached from the DOM."""

    def _is_stale(driver: Any) -> bool:
        try:
            element.is_enabled()
            return False
        except StaleElementReferenceException:
            return True

    return _is_stale


def javascript_returns_true(script: str) -> Condition:
    """True once ``script`` evaluates to a truthy value in the page."""

    def _js_true(driver: Any) -> bool:
        return bool(driver.execute_script(script))

    return _js_true


def all_of(*conditions: Condition) -> Condition:
    """
    True when every condition holds on the same poll.

    A sub-condition raising a driver error counts as false for this poll.
    """

    def _all_of(driver: Any) -> bool:
        for condition in conditions:
            try:
                if not condition(driver):
                    return False
            except WebDriverException as e:
                logger.debug(f"Sub-condition in all_of raised {type(e).__name__}; treating as false")
                return False
        return True

    return _all_of


def any_of(*conditions: Condition) -> Any:
    """Returns the first truthy sub-condition result on a poll, else False."""

    def _any_of(driver: Any) -> Any:
        for condition in conditions:
            try:
                result = condition(driver)
            except WebDriverException as e:
                logger.debug(f"Sub-condition in any_of raised {type(e).__name__}; skipping")
                continue
            if result:
                return result
        return False

    return _any_of


__all__ = [
    "Condition",
    "document_is_ready",
    "title_contains",
    "visibility_of",
    "visibility_of_any",
    "visibility_of_element",
    "invisibility_of",
    "element_attribute_to_be",
    "element_count_to_be",
    "element_count_at_least",
    "element_text_to_change_from",
    "element_to_be_stale",
    "javascript_returns_true",
    "all_of",
    "any_of",
]

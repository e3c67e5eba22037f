"""
================================================================================
Locators
================================================================================

Immutable element locators for Page Object element maps.

    - Locator:       one Selenium strategy + selector, optionally named
    - LocatorGroup:  primary locator plus fallbacks; satisfied by any member

Locator Priority Order (recommended):
    1. data-test attribute (most stable)
    2. aria-label (accessibility-based)
    3. Visible text content
    4. CSS selectors
    5. XPath (last resort)

Usage:
    >>> USERNAME = data_test("username", name="username_input")
    >>> driver.find_elements(*USERNAME)
    >>> LOGIN = group("login_button", data_test("login-button"), by_id("login-button"))

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from selenium.webdriver.common.by import By


@dataclass(frozen=True)
class Locator:
    """
    A single element locator.

    Iterating a Locator yields ``(by, value)`` so it can be passed straight
    to Selenium: ``driver.find_elements(*locator)``.
    """
    by: str
    value: str
    name: Optional[str] = None

    def __iter__(self) -> Iterator[str]:
        yield self.by
        yield self.value

    def as_tuple(self) -> Tuple[str, str]:
        """Selenium-style ``(By.X, value)`` tuple."""
        return (self.by, self.value)

    def named(self, name: str) -> "Locator":
        """Copy of this locator carrying a display name."""
        return Locator(self.by, self.value, name)

    def __str__(self) -> str:
        selector = f"{self.by}={self.value}"
        return f"{self.name} ({selector})" if self.name else selector


@dataclass(frozen=True)
class LocatorGroup:
    """
    A named element with fallback locators.

    The first locator is the primary one. The group counts as visible when
    any member resolves to a visible element.
    """
    name: str
    locators: Tuple[Locator, ...]

    def __post_init__(self) -> None:
        if not self.locators:
            raise ValueError(f"LocatorGroup '{self.name}' needs at least one locator")

    @property
    def primary(self) -> Locator:
        return self.locators[0]

    def __iter__(self) -> Iterator[Locator]:
        return iter(self.locators)

    def __len__(self) -> int:
        return len(self.locators)

    def __str__(self) -> str:
        return f"{self.name} [{' | '.join(f'{loc.by}={loc.value}' for loc in self.locators)}]"


# Anything a page may declare as a critical element
CriticalElement = Union[Locator, LocatorGroup]


def data_test(test_id: str, name: Optional[str] = None) -> Locator:
    """Element with a specific ``data-test`` attribute."""
    return Locator(By.CSS_SELECTOR, f"[data-test='{test_id}']", name)


def aria_label(label: str, name: Optional[str] = None) -> Locator:
    """Element with a specific ``aria-label`` attribute."""
    return Locator(By.CSS_SELECTOR, f"[aria-label='{label}']", name)


def text_equals(text: str, tag_name: str = "*", name: Optional[str] = None) -> Locator:
    """
    Element whose normalized text content equals ``text`` exactly.

    Best for elements where text is unique and static.
    """
    return Locator(By.XPATH, f"//{tag_name}[normalize-space(.)='{text}']", name)


def text_contains(text: str, tag_name: str = "*", name: Optional[str] = None) -> Locator:
    """Element whose normalized text content contains ``text`` (case-sensitive)."""
    return Locator(By.XPATH, f"//{tag_name}[contains(normalize-space(.), '{text}')]", name)


def css(selector: str, name: Optional[str] = None) -> Locator:
    return Locator(By.CSS_SELECTOR, selector, name)


def xpath(expression: str, name: Optional[str] = None) -> Locator:
    return Locator(By.XPATH, expression, name)


def by_id(element_id: str, name: Optional[str] = None) -> Locator:
    return Locator(By.ID, element_id, name)


def group(name: str, primary: Locator, *fallbacks: Locator) -> LocatorGroup:
    """Build a LocatorGroup from a primary locator and fallbacks."""
    return LocatorGroup(name=name, locators=(primary,) + tuple(fallbacks))


__all__ = [
    "Locator",
    "LocatorGroup",
    "CriticalElement",
    "data_test",
    "aria_label",
    "text_equals",
    "text_contains",
    "css",
    "xpath",
    "by_id",
    "group",
]

"""
================================================================================
Failure Kinds (driver boundary)
================================================================================

Closed enumeration of the browser-automation failures the framework knows
how to reason about, and the Selenium adapter that maps native Selenium
exceptions onto it.

The retry policy only ever sees a FailureKind. Which kinds are retryable is
still configuration data: names in ``retry_policy.retryable_exception_full_names``
are resolved to kinds once, at load time.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Type

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    ElementNotVisibleException,
    InvalidElementStateException,
    JavascriptException,
    MoveTargetOutOfBoundsException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)

from .exceptions import ConfigurationError, WaitTimeoutError


class FailureKind(str, Enum):
    """Known transient-failure candidates at the driver boundary."""

    NO_SUCH_ELEMENT = "NO_SUCH_ELEMENT"
    STALE_ELEMENT_REFERENCE = "STALE_ELEMENT_REFERENCE"
    ELEMENT_NOT_INTERACTABLE = "ELEMENT_NOT_INTERACTABLE"
    ELEMENT_CLICK_INTERCEPTED = "ELEMENT_CLICK_INTERCEPTED"
    TIMEOUT = "TIMEOUT"
    INVALID_ELEMENT_STATE = "INVALID_ELEMENT_STATE"
    MOVE_TARGET_OUT_OF_BOUNDS = "MOVE_TARGET_OUT_OF_BOUNDS"
    JAVASCRIPT_ERROR = "JAVASCRIPT_ERROR"


# Most specific classes first: ElementNotInteractableException and
# ElementNotVisibleException both derive from InvalidElementStateException.
SELENIUM_FAILURE_KINDS: List[Tuple[Type[BaseException], FailureKind]] = [
    (StaleElementReferenceException, FailureKind.STALE_ELEMENT_REFERENCE),
    (NoSuchElementException, FailureKind.NO_SUCH_ELEMENT),
    (ElementClickInterceptedException, FailureKind.ELEMENT_CLICK_INTERCEPTED),
    (ElementNotInteractableException, FailureKind.ELEMENT_NOT_INTERACTABLE),
    (ElementNotVisibleException, FailureKind.ELEMENT_NOT_INTERACTABLE),
    (InvalidElementStateException, FailureKind.INVALID_ELEMENT_STATE),
    (MoveTargetOutOfBoundsException, FailureKind.MOVE_TARGET_OUT_OF_BOUNDS),
    (JavascriptException, FailureKind.JAVASCRIPT_ERROR),
    (TimeoutException, FailureKind.TIMEOUT),
    (WaitTimeoutError, FailureKind.TIMEOUT),
]

# Names used by other Selenium bindings for the same failures
_NAME_ALIASES: Dict[str, FailureKind] = {
    "WebDriverTimeoutException": FailureKind.TIMEOUT,
}

DEFAULT_RETRYABLE_NAMES: Tuple[str, ...] = (
    "selenium.common.exceptions.NoSuchElementException",
    "selenium.common.exceptions.StaleElementReferenceException",
    "selenium.common.exceptions.ElementNotInteractableException",
    "selenium.common.exceptions.TimeoutException",
    "selenium.common.exceptions.ElementClickInterceptedException",
)


def _class_name_index() -> Dict[str, FailureKind]:
    index = dict(_NAME_ALIASES)
    for exc_type, kind in SELENIUM_FAILURE_KINDS:
        index.setdefault(exc_type.__name__, kind)
    return index


def failure_kind_of(error: BaseException) -> Optional[FailureKind]:
    """
    Map an exception to its FailureKind by type identity.

    Subclasses map to the kind of their nearest listed ancestor. The
    exception message is never inspected.

    Returns:
        The FailureKind, or None for errors the adapter does not know
    """
    for exc_type, kind in SELENIUM_FAILURE_KINDS:
        if isinstance(error, exc_type):
            return kind
    return None


def resolve_failure_kind(name: str) -> FailureKind:
    """
    Resolve a configured name to a FailureKind.

    Accepted forms:
        - Kind name: "STALE_ELEMENT_REFERENCE"
        - Short class name: "StaleElementReferenceException"
        - Fully-qualified class name:
          "selenium.common.exceptions.StaleElementReferenceException"
          (any namespace prefix, e.g. "OpenQA.Selenium.NoSuchElementException")

    Raises:
        ConfigurationError: If the name matches no known failure kind
    """
    candidate = name.strip()
    if candidate.upper() in FailureKind.__members__:
        return FailureKind[candidate.upper()]

    short_name = candidate.rsplit(".", 1)[-1]
    kind = _class_name_index().get(short_name)
    if kind is None:
        raise ConfigurationError(
            f"Unknown retryable exception name: '{name}'. "
            f"Known kinds: {', '.join(k.name for k in FailureKind)}"
        )
    return kind


def resolve_failure_kinds(names: Iterable[str]) -> frozenset:
    """Resolve every configured name; fails on the first unknown one."""
    return frozenset(resolve_failure_kind(name) for name in names)


__all__ = [
    "FailureKind",
    "SELENIUM_FAILURE_KINDS",
    "DEFAULT_RETRYABLE_NAMES",
    "failure_kind_of",
    "resolve_failure_kind",
    "resolve_failure_kinds",
]

"""
================================================================================
Page Readiness Gate
================================================================================

Confirms a page is usable before a test touches it:

    1. document.readyState is 'complete'
    2. every critical element (Locator or LocatorGroup) is visible,
       checked in declaration order, failing fast on the first miss
    3. any additional page-specific conditions hold (all-of)

The gate never partially passes. ``check`` reports the outcome as a
ReadinessResult value; ``ensure`` raises PageNotReadyError instead, with the
underlying WaitTimeoutError chained as the cause.

Every stage, and every critical element, waits up to the full timeout, so a
slow page may spend up to (elements + 2) * timeout in the gate.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import allure
from loguru import logger

from .conditions import all_of, document_is_ready, visibility_of_element
from .exceptions import PageNotReadyError, WaitTimeoutError
from .locators import CriticalElement
from .wait_helpers import WaitConfig, Waiter


STAGE_DOCUMENT = "document"
STAGE_CRITICAL_ELEMENT = "critical-element"
STAGE_ADDITIONAL_CONDITIONS = "additional-conditions"


@dataclass(frozen=True)
class ReadinessResult:
    """
    Outcome of one readiness check.

    Attributes:
        ready: True only if every stage passed
        page_name: Page the check ran for
        elapsed: Seconds spent in the gate
        error: The failure, when not ready
    """
    ready: bool
    page_name: str
    elapsed: float
    error: Optional[PageNotReadyError] = None

    def __bool__(self) -> bool:
        return self.ready

    def raise_for_failure(self) -> "ReadinessResult":
        """Raise the recorded PageNotReadyError if the page is not ready."""
        if not self.ready and self.error is not None:
            raise self.error
        return self


class PageReadinessGate:
    """
    Readiness gate for one browser session.

    Example:
        gate = PageReadinessGate(driver, timeout=10)
        result = gate.check("LoginPage", [USERNAME, PASSWORD, LOGIN_BUTTON])
        if not result:
            pytest.fail(str(result.error))
    """

    def __init__(
        self,
        driver: Any,
        timeout: float = 10.0,
        poll_interval: float = 0.5,
    ):
        self.driver = driver
        self.waiter = Waiter(driver, WaitConfig(timeout=timeout, poll_interval=poll_interval))

    @property
    def timeout(self) -> float:
        return self.waiter.timeout

    def check(
        self,
        page_name: str,
        critical_elements: Sequence[CriticalElement] = (),
        additional_conditions: Sequence[Callable[[Any], Any]] = (),
    ) -> ReadinessResult:
        """
        Run the gate and return its outcome as a value.

        Only wait timeouts are turned into a not-ready result. Any other
        error (e.g. a broken predicate) propagates.
        """
        start = time.monotonic()
        try:
            self._run(page_name, list(critical_elements), list(additional_conditions), start)
        except PageNotReadyError as e:
            elapsed = time.monotonic() - start
            logger.error(f"{e}")
            return ReadinessResult(ready=False, page_name=page_name, elapsed=elapsed, error=e)

        elapsed = time.monotonic() - start
        logger.info(f"{page_name} fully loaded and validated in {elapsed:.2f}s")
        return ReadinessResult(ready=True, page_name=page_name, elapsed=elapsed)

    def ensure(
        self,
        page_name: str,
        critical_elements: Sequence[CriticalElement] = (),
        additional_conditions: Sequence[Callable[[Any], Any]] = (),
    ) -> ReadinessResult:
        """Like ``check`` but raises PageNotReadyError when the page is not ready."""
        return self.check(page_name, critical_elements, additional_conditions).raise_for_failure()

    def _run(
        self,
        page_name: str,
        critical_elements: list,
        additional_conditions: list,
        start: float,
    ) -> None:
        expected = len(critical_elements)

        def not_ready(stage: str, locator: Any = None) -> PageNotReadyError:
            return PageNotReadyError(
                page_name=page_name,
                stage=stage,
                expected_count=expected,
                locator=locator,
                elapsed=time.monotonic() - start,
            )

        with allure.step(f"Wait for {page_name} document ready"):
            try:
                self.waiter.until(document_is_ready(), description=f"{page_name} document.readyState")
            except WaitTimeoutError as e:
                raise not_ready(STAGE_DOCUMENT) from e
            logger.debug(f"{page_name} document.readyState is 'complete'")

        if not critical_elements:
            logger.trace(f"No critical elements defined for {page_name}")
        else:
            with allure.step(f"Ensure {expected} critical element(s) of {page_name} are visible"):
                for element in critical_elements:
                    try:
                        self.waiter.until(
                            visibility_of_element(element),
                            description=f"{page_name} critical element {element}",
                        )
                    except WaitTimeoutError as e:
                        raise not_ready(STAGE_CRITICAL_ELEMENT, locator=element) from e
                logger.debug(f"All {expected} critical element(s) on {page_name} are visible")

        if additional_conditions:
            with allure.step(f"Wait for {len(additional_conditions)} additional condition(s) of {page_name}"):
                try:
                    self.waiter.until(
                        all_of(*additional_conditions),
                        description=f"{page_name} additional readiness conditions",
                    )
                except WaitTimeoutError as e:
                    raise not_ready(STAGE_ADDITIONAL_CONDITIONS) from e


__all__ = [
    "STAGE_DOCUMENT",
    "STAGE_CRITICAL_ELEMENT",
    "STAGE_ADDITIONAL_CONDITIONS",
    "ReadinessResult",
    "PageReadinessGate",
]

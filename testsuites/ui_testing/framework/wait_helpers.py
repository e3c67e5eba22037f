# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Explicit wait engine for UI testing. Polls a predicate against the live
# browser until it returns a truthy value or the timeout elapses.
#
# Key Features:
#   - Fixed-cadence polling with a monotonic deadline
#   - Page-scoped default timeout, overridable per call
#   - Driver errors raised by the predicate count as "not yet satisfied"
#   - Anything else propagates immediately
#   - Timeout errors carry elapsed time, last value and last swallowed error
#
# Usage:
#   waiter = Waiter(driver, WaitConfig(timeout=10))
#   element = waiter.until(visibility_of(LOGIN_BUTTON), description="login button")
#   wait_until(driver, document_is_ready(), timeout=5)
#
# ================================================================================

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from loguru import logger
from selenium.common.exceptions import WebDriverException

from .exceptions import WaitTimeoutError


T = TypeVar('T')

Predicate = Callable[[Any], T]

# Errors treated as "condition not met yet" while polling
DEFAULT_IGNORED_EXCEPTIONS: Tuple[Type[BaseException], ...] = (WebDriverException,)


@dataclass(frozen=True)
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        timeout: Total timeout in seconds
        poll_interval: Delay between predicate evaluations in seconds
    """
    timeout: float = 10.0
    poll_interval: float = 0.5

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> "WaitConfig":
        """Return a config with per-call overrides applied."""
        return WaitConfig(
            timeout=self.timeout if timeout is None else timeout,
            poll_interval=self.poll_interval if poll_interval is None else poll_interval,
        )


def _describe(predicate: Callable, description: Optional[str]) -> str:
    if description:
        return description
    return getattr(predicate, "__name__", repr(predicate))


class Waiter:
    """
    Explicit wait bound to one browser session.

    The predicate receives the driver on every evaluation and is evaluated at
    least once, even with a zero timeout. The calling thread blocks while
    polling; there is no external cancellation.
    """

    def __init__(
        self,
        driver: Any,
        config: Optional[WaitConfig] = None,
        ignored_exceptions: Tuple[Type[BaseException], ...] = DEFAULT_IGNORED_EXCEPTIONS,
    ):
        """
        Initialize waiter.

        Args:
            driver: Selenium WebDriver (or any object the predicates accept)
            config: Default timeout / poll interval for this waiter
            ignored_exceptions: Predicate errors treated as "not yet satisfied"
        """
        self.driver = driver
        self.config = config or WaitConfig()
        self.ignored_exceptions = tuple(ignored_exceptions)

    @property
    def timeout(self) -> float:
        return self.config.timeout

    def until(
        self,
        predicate: Predicate,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        description: Optional[str] = None,
    ) -> T:
        """
        Wait until ``predicate(driver)`` returns a truthy value.

        Args:
            predicate: Callable taking the driver
            timeout: Per-call timeout override in seconds
            poll_interval: Per-call poll interval override in seconds
            description: Human-readable description for logs and errors

        Returns:
            The first truthy value returned by the predicate

        Raises:
            WaitTimeoutError: If the predicate is never truthy within the timeout
        """
        config = self.config.with_overrides(timeout, poll_interval)
        what = _describe(predicate, description)

        start = time.monotonic()
        deadline = start + config.timeout
        attempt = 0
        last_value: Any = None
        last_error: Optional[BaseException] = None

        while True:
            attempt += 1
            try:
                value = predicate(self.driver)
                if value:
                    logger.debug(
                        f"Wait satisfied after {attempt} attempt(s) "
                        f"({time.monotonic() - start:.2f}s): {what}"
                    )
                    return value
                last_value = value
            except self.ignored_exceptions as e:
                last_error = e
                logger.trace(f"Attempt {attempt} for '{what}' raised {type(e).__name__}; retrying")

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                elapsed = time.monotonic() - start
                logger.debug(f"Wait timed out after {attempt} attempt(s) ({elapsed:.2f}s): {what}")
                raise WaitTimeoutError(
                    description=what,
                    timeout=config.timeout,
                    elapsed=elapsed,
                    last_value=last_value,
                    last_error=last_error,
                )

            time.sleep(min(config.poll_interval, remaining))

    def until_not(
        self,
        predicate: Predicate,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        description: Optional[str] = None,
    ) -> bool:
        """
        Wait until ``predicate(driver)`` returns a falsy value.

        An ignored driver error (e.g. the element is gone) counts as falsy.

        Returns:
            True once the predicate is falsy

        Raises:
            WaitTimeoutError: If the predicate stays truthy for the whole timeout
        """
        ignored = self.ignored_exceptions

        def negated(driver: Any) -> bool:
            try:
                return not predicate(driver)
            except ignored:
                return True

        return self.until(
            negated,
            timeout=timeout,
            poll_interval=poll_interval,
            description=f"NOT {_describe(predicate, description)}",
        )


def wait_until(
    driver: Any,
    predicate: Predicate,
    timeout: float = 10.0,
    poll_interval: float = 0.5,
    description: Optional[str] = None,
) -> T:
    """
    One-shot explicit wait.

    Example:
        title = wait_until(
            driver,
            lambda d: d.title if "Swag" in d.title else None,
            timeout=5,
            description="page title",
        )
    """
    waiter = Waiter(driver, WaitConfig(timeout=timeout, poll_interval=poll_interval))
    return waiter.until(predicate, description=description)


def wait_until_not(
    driver: Any,
    predicate: Predicate,
    timeout: float = 10.0,
    poll_interval: float = 0.5,
    description: Optional[str] = None,
) -> bool:
    """One-shot wait for a predicate to become falsy (e.g. a spinner to go away)."""
    waiter = Waiter(driver, WaitConfig(timeout=timeout, poll_interval=poll_interval))
    return waiter.until_not(predicate, description=description)


__all__ = [
    "WaitConfig",
    "Waiter",
    "wait_until",
    "wait_until_not",
    "DEFAULT_IGNORED_EXCEPTIONS",
]

# ================================================================================
# Retry Module
# ================================================================================
#
# Classification-driven retry for flaky browser operations.
#
# Key Features:
#   - ExceptionClassifier: Transient / Fatal split driven by configured
#     failure kinds (never by message text)
#   - Fixed and capped exponential backoff
#   - Optional result condition (retry while the returned value is unusable)
#   - Exhaustion is reported as RetriesExhaustedError, chained to the last error
#
# Usage:
#   executor = RetryExecutor.from_settings(settings.retry_policy)
#   executor.execute(lambda: driver.find_element(*LOCATOR).click(),
#                    description="click login")
#
#   @retrying(max_attempts=5)
#   def read_badge(driver): ...
#
# ================================================================================

import functools
import time
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TypeVar

from loguru import logger

from .exceptions import RetriesExhaustedError
from .failure_kinds import FailureKind, failure_kind_of, resolve_failure_kinds
from .settings import RetryPolicySettings, load_settings


T = TypeVar('T')


class Classification(str, Enum):
    """Outcome of classifying a failure."""
    TRANSIENT = "transient"
    FATAL = "fatal"


class ExceptionClassifier:
    """
    Maps a raised failure to TRANSIENT or FATAL.

    An error is transient iff its failure kind is in the configured
    retryable set. Errors with no known kind are always fatal. Pure and
    safe to share between sessions.
    """

    def __init__(self, retryable_kinds: Iterable[FailureKind]):
        self.retryable_kinds = frozenset(retryable_kinds)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "ExceptionClassifier":
        """Build from configured kind / exception class names."""
        return cls(resolve_failure_kinds(names))

    @classmethod
    def from_settings(cls, policy: RetryPolicySettings) -> "ExceptionClassifier":
        return cls(policy.retryable_kinds)

    def classify(self, error: BaseException) -> Classification:
        kind = failure_kind_of(error)
        if kind is not None and kind in self.retryable_kinds:
            return Classification.TRANSIENT
        return Classification.FATAL

    def is_transient(self, error: BaseException) -> bool:
        return self.classify(error) is Classification.TRANSIENT


class FixedBackoff:
    """Same delay before every retry."""

    def __init__(self, delay: float = 1.0):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay_seconds = delay

    def delay(self, attempt: int) -> float:
        return self.delay_seconds

    def __repr__(self) -> str:
        return f"FixedBackoff({self.delay_seconds})"


class ExponentialBackoff:
    """
    Exponential backoff capped at ``max_delay``.

    The delay after failed attempt ``n`` (1-based) is
    ``initial * multiplier ** (n - 1)``.
    """

    def __init__(self, initial: float = 1.0, multiplier: float = 2.0, max_delay: float = 30.0):
        if initial < 0 or max_delay < 0:
            raise ValueError("backoff delays must be >= 0")
        if multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {multiplier}")
        self.initial = initial
        self.multiplier = multiplier
        self.max_delay = max_delay

    def delay(self, attempt: int) -> float:
        return min(self.initial * (self.multiplier ** max(attempt - 1, 0)), self.max_delay)

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoff(initial={self.initial}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )


class RetryExecutor:
    """
    Re-invokes an operation while its failures classify as transient.

    Each ``execute`` call owns its own attempt counter, so one executor can
    be shared by every page of a session. The operation must be safe to run
    more than once.
    """

    def __init__(
        self,
        classifier: ExceptionClassifier,
        max_attempts: int = 3,
        backoff: Optional[Any] = None,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.classifier = classifier
        self.max_attempts = max_attempts
        self.backoff = backoff or ExponentialBackoff()

    @classmethod
    def from_settings(cls, policy: RetryPolicySettings) -> "RetryExecutor":
        """Executor configured from the ``retry_policy`` section."""
        return cls(
            classifier=ExceptionClassifier.from_settings(policy),
            max_attempts=policy.max_attempts,
            backoff=ExponentialBackoff(
                initial=policy.initial_delay,
                multiplier=policy.multiplier,
                max_delay=policy.max_delay,
            ),
        )

    def execute(
        self,
        operation: Callable[[], T],
        max_attempts: Optional[int] = None,
        backoff: Optional[Any] = None,
        description: Optional[str] = None,
        result_condition: Optional[Callable[[T], bool]] = None,
    ) -> T:
        """
        Run ``operation`` with retries.

        Args:
            operation: Zero-argument callable to invoke
            max_attempts: Total invocations allowed, first call included
            backoff: Backoff policy overriding the executor default
            description: Name used in logs and errors
            result_condition: Predicate the return value must satisfy;
                a result failing it is retried like a transient failure

        Returns:
            The operation's return value

        Raises:
            RetriesExhaustedError: If every attempt failed transiently
            Exception: Any fatal error from the operation, unchanged
        """
        attempts_allowed = self.max_attempts if max_attempts is None else max_attempts
        if attempts_allowed < 1:
            raise ValueError(f"max_attempts must be >= 1, got {attempts_allowed}")
        policy = backoff or self.backoff
        what = description or getattr(operation, "__name__", "operation")

        last_error: Optional[BaseException] = None
        last_result: Any = None

        for attempt in range(1, attempts_allowed + 1):
            try:
                result = operation()
            except Exception as e:
                if not self.classifier.is_transient(e):
                    raise
                last_error = e
                reason = f"{failure_kind_of(e).value}: {type(e).__name__}"
            else:
                if result_condition is None or result_condition(result):
                    if attempt > 1:
                        logger.info(f"'{what}' succeeded on attempt {attempt}/{attempts_allowed}")
                    return result
                last_error = None
                last_result = result
                reason = f"result condition not met ({result!r})"

            if attempt == attempts_allowed:
                break

            delay = policy.delay(attempt)
            logger.warning(
                f"'{what}' attempt {attempt}/{attempts_allowed} failed ({reason}). "
                f"Retrying in {delay:.2f}s"
            )
            time.sleep(delay)

        logger.error(f"'{what}' failed after {attempts_allowed} attempt(s)")
        raise RetriesExhaustedError(
            description=what,
            attempts=attempts_allowed,
            last_error=last_error,
            last_result=last_result,
        ) from last_error


def retrying(
    executor: Optional[RetryExecutor] = None,
    max_attempts: Optional[int] = None,
    backoff: Optional[Any] = None,
    result_condition: Optional[Callable[[Any], bool]] = None,
) -> Callable:
    """
    Decorator form of RetryExecutor.execute.

    Without an explicit executor the policy is read from configuration
    on each call.

    Example:
        @retrying(max_attempts=5, backoff=FixedBackoff(0.2))
        def cart_badge_text(driver):
            return driver.find_element(By.CSS_SELECTOR, ".shopping_cart_badge").text
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            runner = executor
            if runner is None:
                runner = RetryExecutor.from_settings(load_settings().retry_policy)
            return runner.execute(
                lambda: func(*args, **kwargs),
                max_attempts=max_attempts,
                backoff=backoff,
                description=func.__qualname__,
                result_condition=result_condition,
            )

        return wrapper

    return decorator


__all__ = [
    "Classification",
    "ExceptionClassifier",
    "FixedBackoff",
    "ExponentialBackoff",
    "RetryExecutor",
    "retrying",
]

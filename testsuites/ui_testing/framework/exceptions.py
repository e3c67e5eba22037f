"""
================================================================================
UI Framework Exceptions
================================================================================

Exception hierarchy shared by the wait engine, readiness gate, retry
executor and visual comparator.

Every exception carries the context a failing test needs in its report
(page name, locator, elapsed time, attempt count, file paths) both as
attributes and in the rendered message.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Tuple


class UiFrameworkError(Exception):
    """Base exception for all UI framework failures."""
    pass


class ConfigurationError(UiFrameworkError):
    """Raised when configuration loading or validation fails."""
    pass


class BrowserSetupError(UiFrameworkError):
    """Raised when a WebDriver session cannot be created."""
    pass


class WaitTimeoutError(UiFrameworkError):
    """
    Raised when a wait predicate is never satisfied within its timeout.

    Attributes:
        description: Human-readable description of what was awaited
        timeout: Configured timeout in seconds
        elapsed: Seconds actually spent waiting
        last_value: Last (falsy) value returned by the predicate
        last_error: Last driver error swallowed while polling, if any
    """

    def __init__(
        self,
        description: str,
        timeout: float,
        elapsed: float,
        last_value: Any = None,
        last_error: Optional[BaseException] = None,
    ):
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed
        self.last_value = last_value
        self.last_error = last_error

        message = (
            f"Timed out after {elapsed:.2f}s (timeout={timeout}s) waiting for: "
            f"{description}. Last value: {last_value!r}"
        )
        if last_error is not None:
            message += f", last error: {type(last_error).__name__}: {last_error}"
        super().__init__(message)


class PageNotReadyError(UiFrameworkError):
    """
    Raised when a page object fails its readiness gate.

    This is a setup failure for the test, not an assertion failure. The
    original WaitTimeoutError is chained as ``__cause__``.
    """

    def __init__(
        self,
        page_name: str,
        stage: str,
        expected_count: int,
        locator: Any = None,
        elapsed: Optional[float] = None,
    ):
        self.page_name = page_name
        self.stage = stage
        self.expected_count = expected_count
        self.locator = locator
        self.elapsed = elapsed

        message = (
            f"Page '{page_name}' is not ready (stage: {stage}, "
            f"critical elements expected: {expected_count})"
        )
        if locator is not None:
            message += f". Failing locator: {locator}"
        if elapsed is not None:
            message += f". Elapsed: {elapsed:.2f}s"
        super().__init__(message)


class RetriesExhaustedError(UiFrameworkError):
    """
    Raised when a transient failure persists after all retry attempts.

    Distinguishes "never worked" from an operation that eventually
    succeeded. The last transient error is chained as ``__cause__``.
    """

    def __init__(
        self,
        description: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        last_result: Any = None,
    ):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        self.last_result = last_result

        if last_error is not None:
            reason = f"{type(last_error).__name__}: {last_error}"
        else:
            reason = f"result condition not met (last result: {last_result!r})"
        super().__init__(
            f"Retries exhausted after {attempts} attempt(s) for '{description}': {reason}"
        )


class VisualComparisonError(UiFrameworkError):
    """Base class for structural visual comparison failures (never retried)."""
    pass


class BaselineMissingError(VisualComparisonError):
    """Raised when a baseline is absent and auto-creation is disabled."""

    def __init__(self, baseline_name: str, baseline_path: Path):
        self.baseline_name = baseline_name
        self.baseline_path = Path(baseline_path)
        super().__init__(
            f"Visual baseline missing for '{baseline_name}' at '{baseline_path}' "
            f"and auto-creation is disabled"
        )


class DimensionMismatchError(VisualComparisonError):
    """Raised when the captured image and the baseline differ in size."""

    def __init__(
        self,
        baseline_name: str,
        baseline_size: Tuple[int, int],
        actual_size: Tuple[int, int],
    ):
        self.baseline_name = baseline_name
        self.baseline_size = baseline_size
        self.actual_size = actual_size
        super().__init__(
            f"Image dimensions mismatch for '{baseline_name}'. "
            f"Baseline: {baseline_size[0]}x{baseline_size[1]}, "
            f"actual: {actual_size[0]}x{actual_size[1]}"
        )


class VisualMismatchError(AssertionError):
    """Raised by visual assertions when the pixel difference exceeds tolerance."""

    def __init__(self, baseline_name: str, result: Any):
        self.baseline_name = baseline_name
        self.result = result
        message = (
            f"Visual mismatch for '{baseline_name}'. Pixel error "
            f"{result.diff_percent:.3f}% exceeded tolerance {result.tolerance_percent:.3f}%"
        )
        if result.diff_artifact_path is not None:
            message += f". Diff image: {result.diff_artifact_path}"
        super().__init__(message)


__all__ = [
    "UiFrameworkError",
    "ConfigurationError",
    "BrowserSetupError",
    "WaitTimeoutError",
    "PageNotReadyError",
    "RetriesExhaustedError",
    "VisualComparisonError",
    "BaselineMissingError",
    "DimensionMismatchError",
    "VisualMismatchError",
]

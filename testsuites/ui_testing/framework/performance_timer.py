"""
================================================================================
Performance Timer
================================================================================

Measures how long an operation takes, logs it, and optionally attaches the
timing (with a PASS / FAIL verdict against an expected maximum) to Allure.

Usage:
    with PerformanceTimer("LoginPage readiness") as timer:
        page.ensure_ready()
        timer.stop_and_log(attach_to_allure=True, expected_max_ms=3000)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from loguru import logger

from uitest_tools.report_tools import attach_text


class PerformanceTimer:
    """
    Stopwatch for one named operation.

    Starts on construction. Leaving a ``with`` block stops the timer and logs
    the duration unless ``stop_and_log`` was already called.
    """

    def __init__(
        self,
        operation_name: str,
        log_level: str = "INFO",
        extra: Optional[Dict[str, Any]] = None,
    ):
        if not operation_name:
            raise ValueError("operation_name is required")
        self.operation_name = operation_name
        self.log_level = log_level
        self.extra = dict(extra or {})
        self._start = time.perf_counter()
        self._end: Optional[float] = None
        self._logged = False

    @property
    def is_running(self) -> bool:
        return self._end is None

    @property
    def elapsed(self) -> float:
        """Elapsed seconds, live while running."""
        end = self._end if self._end is not None else time.perf_counter()
        return end - self._start

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed * 1000)

    def stop(self) -> float:
        if self._end is None:
            self._end = time.perf_counter()
        return self.elapsed

    def verdict(self, expected_max_ms: Optional[int] = None) -> str:
        if expected_max_ms is None:
            return "Actual"
        return "PASS" if self.elapsed_ms <= expected_max_ms else "FAIL (Exceeded Threshold)"

    def stop_and_log(
        self,
        attach_to_allure: bool = False,
        expected_max_ms: Optional[int] = None,
    ) -> int:
        """
        Stop the timer, log the duration and optionally attach it to Allure.

        Returns:
            Elapsed milliseconds
        """
        self.stop()
        self._logged = True

        logger.bind(
            operation=self.operation_name,
            duration_ms=self.elapsed_ms,
            **self.extra,
        ).log(
            self.log_level,
            f"Performance: {self.operation_name} completed in {self.elapsed_ms} ms "
            f"({self.elapsed:.3f} s)",
        )

        if attach_to_allure:
            self._attach(expected_max_ms)
        return self.elapsed_ms

    def _attach(self, expected_max_ms: Optional[int]) -> None:
        content = (
            f"Operation: {self.operation_name}\n"
            f"Duration: {self.elapsed_ms} ms ({self.elapsed:.3f} s)"
        )
        if expected_max_ms is not None:
            content += f"\nExpected Max: {expected_max_ms} ms\nStatus: {self.verdict(expected_max_ms)}"
        attach_text(content, name=f"{self.operation_name} - Performance")

    def __enter__(self) -> "PerformanceTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._logged:
            self.stop_and_log()


__all__ = ["PerformanceTimer"]

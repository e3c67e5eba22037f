"""
================================================================================
UI Testing Framework
================================================================================

Selenium-based UI automation framework with a resilience layer.

Components:
    - wait_helpers: Explicit wait engine
    - conditions: Expected conditions for the wait engine
    - readiness: Page readiness gate
    - failure_kinds / retry: Failure classification and retry executor
    - visual_comparator / visual_service: Visual regression checks
    - page_base: Base page object (two-phase readiness)
    - browser_manager: WebDriver lifecycle management
    - config_loader / settings: YAML + env configuration, typed settings

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import ConfigLoader
from .exceptions import (
    BaselineMissingError,
    BrowserSetupError,
    ConfigurationError,
    DimensionMismatchError,
    PageNotReadyError,
    RetriesExhaustedError,
    UiFrameworkError,
    VisualComparisonError,
    VisualMismatchError,
    WaitTimeoutError,
)
from .failure_kinds import FailureKind, failure_kind_of
from .locators import Locator, LocatorGroup
from .page_base import BasePage
from .readiness import PageReadinessGate, ReadinessResult
from .retry import (
    Classification,
    ExceptionClassifier,
    ExponentialBackoff,
    FixedBackoff,
    RetryExecutor,
    retrying,
)
from .settings import Settings, load_settings
from .visual_comparator import ComparisonResult, VisualComparator
from .visual_service import VisualTestService
from .wait_helpers import WaitConfig, Waiter, wait_until, wait_until_not

__all__ = [
    "BasePage",
    "BrowserManager",
    "ConfigLoader",
    "Settings",
    "load_settings",
    "Locator",
    "LocatorGroup",
    "WaitConfig",
    "Waiter",
    "wait_until",
    "wait_until_not",
    "PageReadinessGate",
    "ReadinessResult",
    "FailureKind",
    "failure_kind_of",
    "Classification",
    "ExceptionClassifier",
    "FixedBackoff",
    "ExponentialBackoff",
    "RetryExecutor",
    "retrying",
    "ComparisonResult",
    "VisualComparator",
    "VisualTestService",
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

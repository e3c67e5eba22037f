"""
================================================================================
Typed Framework Settings
================================================================================

Immutable settings objects built from the ConfigLoader.

Sections:
    - framework:     default wait timeout / poll interval, artifacts dir
    - retry_policy:  retryable failure names and backoff limits
    - visual:        baseline directory, tolerance, auto-creation flags
    - browser:       vendor + shared options + vendor extension
    - grid:          Selenium Grid connection

All settings are frozen after load and safe to share between sessions.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .config_loader import ConfigLoader
from .exceptions import ConfigurationError
from .failure_kinds import DEFAULT_RETRYABLE_NAMES, resolve_failure_kinds


@dataclass(frozen=True)
class FrameworkSettings:
    """
    Common framework settings.

    Attributes:
        base_url: Application under test
        default_timeout: Default explicit wait timeout in seconds
        poll_interval: Default wait polling cadence in seconds
        artifacts_dir: Directory for screenshots and visual actuals
        expected_page_load_ms: Readiness duration reported as PASS in Allure
    """
    base_url: str = "https://www.saucedemo.com"
    default_timeout: float = 10.0
    poll_interval: float = 0.5
    artifacts_dir: str = "artifacts"
    expected_page_load_ms: int = 3000

    def __post_init__(self) -> None:
        if self.default_timeout < 0:
            raise ConfigurationError("framework.default_timeout must be >= 0")
        if self.poll_interval <= 0:
            raise ConfigurationError("framework.poll_interval must be > 0")


@dataclass(frozen=True)
class RetryPolicySettings:
    """
    Retry policy settings.

    Attributes:
        retryable_exception_full_names: Names of failures considered transient.
            Kind names, short or fully-qualified exception class names.
        max_attempts: Total invocations allowed (first call included)
        initial_delay: Backoff before the first retry, in seconds
        multiplier: Exponential backoff multiplier
        max_delay: Upper bound for a single backoff delay
    """
    retryable_exception_full_names: Tuple[str, ...] = DEFAULT_RETRYABLE_NAMES
    max_attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self) -> None:
        if not self.retryable_exception_full_names:
            raise ConfigurationError(
                "retry_policy.retryable_exception_full_names must not be empty"
            )
        if self.max_attempts < 1:
            raise ConfigurationError("retry_policy.max_attempts must be >= 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry_policy delays must be >= 0")
        # Fail at load time on unknown names
        resolve_failure_kinds(self.retryable_exception_full_names)

    @property
    def retryable_kinds(self) -> frozenset:
        """Resolved FailureKind set."""
        return resolve_failure_kinds(self.retryable_exception_full_names)


@dataclass(frozen=True)
class VisualTestSettings:
    """
    Visual regression settings.

    Attributes:
        baseline_directory: Root directory of baseline images
        auto_create_baseline_if_missing: Persist the capture when no baseline exists
        default_comparison_tolerance_percent: Allowed differing pixels, 0-100
        warn_on_automatic_baseline_creation: Emit a warning on auto-creation
        pixel_threshold: Max per-channel delta (0-255) still counted as equal
    """
    baseline_directory: str = "visual_baselines"
    auto_create_baseline_if_missing: bool = True
    default_comparison_tolerance_percent: float = 0.20
    warn_on_automatic_baseline_creation: bool = True
    pixel_threshold: int = 0

    def __post_init__(self) -> None:
        if not self.baseline_directory:
            raise ConfigurationError("visual.baseline_directory is required")
        if not 0 <= self.default_comparison_tolerance_percent <= 100:
            raise ConfigurationError(
                "visual.default_comparison_tolerance_percent must be between 0 and 100"
            )
        if not 0 <= self.pixel_threshold <= 255:
            raise ConfigurationError("visual.pixel_threshold must be between 0 and 255")


class BrowserType(str, Enum):
    """Supported browser vendors."""
    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"


@dataclass(frozen=True)
class ChromiumExtension:
    """Options specific to Chromium-based browsers (Chrome, Edge)."""
    binary_location: Optional[str] = None
    experimental_options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FirefoxExtension:
    """Options specific to Firefox."""
    binary_location: Optional[str] = None
    preferences: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BrowserSettings:
    """
    Browser settings: shared fields plus one vendor extension.

    The extension type is selected by ``browser_type``; Chrome and Edge carry
    a ChromiumExtension, Firefox a FirefoxExtension.
    """
    browser_type: BrowserType = BrowserType.CHROME
    headless: bool = True
    window_width: int = 1920
    window_height: int = 1080
    page_load_timeout: float = 30.0
    arguments: Tuple[str, ...] = ()
    extension: Union[ChromiumExtension, FirefoxExtension] = field(default_factory=ChromiumExtension)

    def __post_init__(self) -> None:
        expected = FirefoxExtension if self.browser_type == BrowserType.FIREFOX else ChromiumExtension
        if not isinstance(self.extension, expected):
            raise ConfigurationError(
                f"Browser '{self.browser_type.value}' requires {expected.__name__}, "
                f"got {type(self.extension).__name__}"
            )


@dataclass(frozen=True)
class SeleniumGridSettings:
    """Remote Selenium Grid connection."""
    enabled: bool = False
    url: str = "http://localhost:4444"


@dataclass(frozen=True)
class Settings:
    """All framework settings, loaded once per process."""
    framework: FrameworkSettings = field(default_factory=FrameworkSettings)
    retry_policy: RetryPolicySettings = field(default_factory=RetryPolicySettings)
    visual: VisualTestSettings = field(default_factory=VisualTestSettings)
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    grid: SeleniumGridSettings = field(default_factory=SeleniumGridSettings)


def _parse_browser_type(value: Any) -> BrowserType:
    try:
        return BrowserType(str(value).lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported browser type: '{value}'. "
            f"Expected one of: {', '.join(b.value for b in BrowserType)}"
        ) from e


def _load_browser(config: ConfigLoader) -> BrowserSettings:
    defaults = BrowserSettings()
    browser_type = _parse_browser_type(config.get("browser.type", defaults.browser_type.value))
    binary = config.get("browser.binary_location")

    if browser_type == BrowserType.FIREFOX:
        extension: Union[ChromiumExtension, FirefoxExtension] = FirefoxExtension(
            binary_location=binary,
            preferences=dict(config.get("browser.firefox_preferences", {}) or {}),
        )
    else:
        extension = ChromiumExtension(
            binary_location=binary,
            experimental_options=dict(config.get("browser.experimental_options", {}) or {}),
        )

    return BrowserSettings(
        browser_type=browser_type,
        headless=bool(config.get("browser.headless", defaults.headless)),
        window_width=int(config.get("browser.window_width", defaults.window_width)),
        window_height=int(config.get("browser.window_height", defaults.window_height)),
        page_load_timeout=float(config.get("browser.page_load_timeout", defaults.page_load_timeout)),
        arguments=tuple(config.get("browser.arguments", list(defaults.arguments)) or ()),
        extension=extension,
    )


def load_settings(config: Optional[ConfigLoader] = None) -> Settings:
    """
    Build all typed settings from configuration.

    Args:
        config: Configuration loader. Uses the process-wide singleton if None.

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If any section holds invalid values
    """
    if config is None:
        config = ConfigLoader()

    fw = FrameworkSettings()
    framework = FrameworkSettings(
        base_url=str(config.get("framework.base_url", fw.base_url)),
        default_timeout=float(config.get("framework.default_timeout", fw.default_timeout)),
        poll_interval=float(config.get("framework.poll_interval", fw.poll_interval)),
        artifacts_dir=str(config.get("framework.artifacts_dir", fw.artifacts_dir)),
        expected_page_load_ms=int(config.get("framework.expected_page_load_ms", fw.expected_page_load_ms)),
    )

    rp = RetryPolicySettings()
    retry_policy = RetryPolicySettings(
        retryable_exception_full_names=tuple(
            config.get(
                "retry_policy.retryable_exception_full_names",
                list(rp.retryable_exception_full_names),
            ) or ()
        ),
        max_attempts=int(config.get("retry_policy.max_attempts", rp.max_attempts)),
        initial_delay=float(config.get("retry_policy.initial_delay", rp.initial_delay)),
        multiplier=float(config.get("retry_policy.multiplier", rp.multiplier)),
        max_delay=float(config.get("retry_policy.max_delay", rp.max_delay)),
    )

    vs = VisualTestSettings()
    visual = VisualTestSettings(
        baseline_directory=str(config.get("visual.baseline_directory", vs.baseline_directory)),
        auto_create_baseline_if_missing=bool(
            config.get("visual.auto_create_baseline_if_missing", vs.auto_create_baseline_if_missing)
        ),
        default_comparison_tolerance_percent=float(
            config.get(
                "visual.default_comparison_tolerance_percent",
                vs.default_comparison_tolerance_percent,
            )
        ),
        warn_on_automatic_baseline_creation=bool(
            config.get(
                "visual.warn_on_automatic_baseline_creation",
                vs.warn_on_automatic_baseline_creation,
            )
        ),
        pixel_threshold=int(config.get("visual.pixel_threshold", vs.pixel_threshold)),
    )

    gs = SeleniumGridSettings()
    grid = SeleniumGridSettings(
        enabled=bool(config.get("grid.enabled", gs.enabled)),
        url=str(config.get("grid.url", gs.url)),
    )

    return Settings(
        framework=framework,
        retry_policy=retry_policy,
        visual=visual,
        browser=_load_browser(config),
        grid=grid,
    )


__all__ = [
    "FrameworkSettings",
    "RetryPolicySettings",
    "VisualTestSettings",
    "BrowserType",
    "ChromiumExtension",
    "FirefoxExtension",
    "BrowserSettings",
    "SeleniumGridSettings",
    "Settings",
    "load_settings",
]

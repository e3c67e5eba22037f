import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    ElementNotVisibleException,
    InvalidElementStateException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from testsuites.ui_testing.framework.exceptions import ConfigurationError, WaitTimeoutError
from testsuites.ui_testing.framework.failure_kinds import (
    SELENIUM_FAILURE_KINDS,
    FailureKind,
    failure_kind_of,
    resolve_failure_kind,
    resolve_failure_kinds,
)
from testsuites.ui_testing.framework.retry import Classification, ExceptionClassifier


@pytest.mark.parametrize(
    "error, kind",
    [
        (NoSuchElementException("x"), FailureKind.NO_SUCH_ELEMENT),
        (StaleElementReferenceException("x"), FailureKind.STALE_ELEMENT_REFERENCE),
        (ElementNotInteractableException("x"), FailureKind.ELEMENT_NOT_INTERACTABLE),
        (ElementNotVisibleException("x"), FailureKind.ELEMENT_NOT_INTERACTABLE),
        (ElementClickInterceptedException("x"), FailureKind.ELEMENT_CLICK_INTERCEPTED),
        (InvalidElementStateException("x"), FailureKind.INVALID_ELEMENT_STATE),
        (TimeoutException("x"), FailureKind.TIMEOUT),
        (WaitTimeoutError("x", timeout=1, elapsed=1), FailureKind.TIMEOUT),
    ],
)
def test_selenium_errors_map_to_kinds(error, kind):
    assert failure_kind_of(error) is kind


def test_unknown_errors_have_no_kind():
    assert failure_kind_of(WebDriverException("session deleted")) is None
    assert failure_kind_of(AssertionError("wrong total")) is None


def test_message_text_is_never_inspected():
    assert failure_kind_of(RuntimeError("stale element reference")) is None


@pytest.mark.parametrize(
    "name",
    [
        "STALE_ELEMENT_REFERENCE",
        "stale_element_reference",
        "StaleElementReferenceException",
        "selenium.common.exceptions.StaleElementReferenceException",
        "OpenQA.Selenium.StaleElementReferenceException",
    ],
)
def test_resolve_name_forms(name):
    assert resolve_failure_kind(name) is FailureKind.STALE_ELEMENT_REFERENCE


def test_resolve_aliases_from_other_bindings():
    assert resolve_failure_kind("OpenQA.Selenium.WebDriverTimeoutException") is FailureKind.TIMEOUT


def test_resolve_unknown_name_fails():
    with pytest.raises(ConfigurationError, match="Unknown retryable exception name"):
        resolve_failure_kinds(["NoSuchElementException", "NoSuchUnicornException"])


def _raised(exc_type):
    if exc_type is WaitTimeoutError:
        return WaitTimeoutError("x", timeout=1, elapsed=1)
    return exc_type("x")


@pytest.mark.parametrize(
    "exc_type",
    [exc_type for exc_type, _ in SELENIUM_FAILURE_KINDS],
    ids=lambda exc_type: exc_type.__name__,
)
def test_configured_class_name_classifies_its_own_error(exc_type):
    resolved = resolve_failure_kind(f"{exc_type.__module__}.{exc_type.__name__}")
    assert failure_kind_of(_raised(exc_type)) is resolved

    classifier = ExceptionClassifier.from_names([exc_type.__name__])
    assert classifier.classify(_raised(exc_type)) is Classification.TRANSIENT


def test_element_not_visible_is_transient_when_configured():
    classifier = ExceptionClassifier.from_names(
        ["selenium.common.exceptions.ElementNotVisibleException"]
    )
    assert classifier.classify(ElementNotVisibleException("x")) is Classification.TRANSIENT
    assert classifier.classify(InvalidElementStateException("x")) is Classification.FATAL

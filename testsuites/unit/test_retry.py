import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    StaleElementReferenceException,
)

from testsuites.ui_testing.framework.exceptions import RetriesExhaustedError, WaitTimeoutError
from testsuites.ui_testing.framework.failure_kinds import FailureKind
from testsuites.ui_testing.framework.retry import (
    Classification,
    ExceptionClassifier,
    ExponentialBackoff,
    FixedBackoff,
    RetryExecutor,
    retrying,
)
from testsuites.ui_testing.framework.settings import RetryPolicySettings


class FlakyOperation:
    """Raises the queued errors in order, then returns the value."""

    def __init__(self, errors, value=None):
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


def _executor(names=("StaleElementReferenceException",), max_attempts=3, backoff=None):
    return RetryExecutor(ExceptionClassifier.from_names(names), max_attempts=max_attempts,
                         backoff=backoff or FixedBackoff(0.5))


def test_stale_twice_then_value_is_returned(clock):
    operation = FlakyOperation(
        [StaleElementReferenceException("stale"), StaleElementReferenceException("stale")],
        value=42,
    )

    assert _executor().execute(operation) == 42
    assert operation.calls == 3
    assert clock.sleeps == [0.5, 0.5]


def test_non_listed_error_fails_after_one_attempt(clock):
    operation = FlakyOperation([NoSuchElementException("absent")], value=42)

    with pytest.raises(NoSuchElementException):
        _executor().execute(operation)

    assert operation.calls == 1
    assert clock.sleeps == []


def test_unknown_error_is_fatal(clock):
    operation = FlakyOperation([ValueError("bad test data")])

    with pytest.raises(ValueError):
        _executor().execute(operation)

    assert operation.calls == 1


def test_exhaustion_raises_with_last_error_chained(clock):
    last = StaleElementReferenceException("still stale")
    operation = FlakyOperation([StaleElementReferenceException("stale")] * 2 + [last])

    with pytest.raises(RetriesExhaustedError) as exc_info:
        _executor().execute(operation, description="click add-to-cart")

    error = exc_info.value
    assert operation.calls == 3
    assert error.attempts == 3
    assert error.last_error is last
    assert error.__cause__ is last
    assert "click add-to-cart" in str(error)


def test_single_attempt_never_sleeps(clock):
    operation = FlakyOperation([StaleElementReferenceException("stale")])

    with pytest.raises(RetriesExhaustedError):
        _executor(max_attempts=1).execute(operation)

    assert operation.calls == 1
    assert clock.sleeps == []


def test_result_condition_retries_unusable_values(clock):
    values = iter(["", "", "3"])

    result = _executor().execute(lambda: next(values), result_condition=bool)

    assert result == "3"


def test_result_condition_exhaustion_reports_last_result(clock):
    with pytest.raises(RetriesExhaustedError) as exc_info:
        _executor(max_attempts=2).execute(lambda: "", result_condition=bool)

    assert exc_info.value.last_error is None
    assert exc_info.value.last_result == ""
    assert exc_info.value.__cause__ is None


def test_exponential_backoff_delays_are_capped(clock):
    operation = FlakyOperation([StaleElementReferenceException("stale")] * 4, value="ok")
    executor = _executor(max_attempts=5, backoff=ExponentialBackoff(initial=1, multiplier=2, max_delay=5))

    assert executor.execute(operation) == "ok"
    assert clock.sleeps == [1, 2, 4, 5]


def test_wait_timeout_is_transient_when_timeouts_are_retryable(clock):
    operation = FlakyOperation([WaitTimeoutError("badge", timeout=1, elapsed=1)], value="1")

    assert _executor(names=("TimeoutException",)).execute(operation) == "1"


def test_per_call_max_attempts_override(clock):
    operation = FlakyOperation([StaleElementReferenceException("stale")] * 4, value="ok")

    assert _executor(max_attempts=2).execute(operation, max_attempts=5) == "ok"
    assert operation.calls == 5


@pytest.mark.parametrize("max_attempts", [0, -1])
def test_max_attempts_below_one_rejected(max_attempts):
    with pytest.raises(ValueError):
        _executor(max_attempts=max_attempts)


def test_classifier_is_pure():
    classifier = ExceptionClassifier.from_names(["ElementClickInterceptedException"])
    error = ElementClickInterceptedException("overlay")

    assert classifier.classify(error) is Classification.TRANSIENT
    assert classifier.classify(error) is Classification.TRANSIENT
    assert classifier.classify(StaleElementReferenceException("x")) is Classification.FATAL


def test_classifier_from_settings_uses_fully_qualified_names():
    policy = RetryPolicySettings(
        retryable_exception_full_names=("selenium.common.exceptions.StaleElementReferenceException",)
    )
    classifier = ExceptionClassifier.from_settings(policy)

    assert classifier.retryable_kinds == frozenset({FailureKind.STALE_ELEMENT_REFERENCE})
    assert classifier.is_transient(StaleElementReferenceException("x"))


def test_executor_from_settings():
    policy = RetryPolicySettings(max_attempts=4, initial_delay=0.1, multiplier=3, max_delay=1)
    executor = RetryExecutor.from_settings(policy)

    assert executor.max_attempts == 4
    assert [executor.backoff.delay(n) for n in (1, 2, 3, 4)] == pytest.approx([0.1, 0.3, 0.9, 1.0])


def test_retrying_decorator(clock):
    operation = FlakyOperation([StaleElementReferenceException("stale")], value="Sauce Labs Backpack")

    @retrying(executor=_executor())
    def first_item_name():
        return operation()

    assert first_item_name() == "Sauce Labs Backpack"
    assert first_item_name.__name__ == "first_item_name"


@pytest.mark.parametrize("kwargs", [{"multiplier": 0.5}, {"initial": -1}, {"max_delay": -1}])
def test_invalid_exponential_backoff(kwargs):
    with pytest.raises(ValueError):
        ExponentialBackoff(**kwargs)

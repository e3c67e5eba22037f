"""
Unit test fixtures: an in-memory WebDriver stand-in and a fake clock.

Nothing here starts a browser; every test in this directory runs offline.
"""

from typing import Dict, List, Optional, Tuple

import pytest
from selenium.common.exceptions import NoSuchElementException

from testsuites.ui_testing.framework import retry, wait_helpers
from testsuites.ui_testing.framework.config_loader import ConfigLoader


class FakeClock:
    """Replaces the ``time`` module of the wait engine and the retry executor."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeElement:
    def __init__(self, text: str = "", displayed: bool = True, enabled: bool = True,
                 rect: Optional[Dict[str, float]] = None, attributes: Optional[Dict[str, str]] = None):
        self.text = text
        self.displayed = displayed
        self.enabled = enabled
        self.rect = rect or {"x": 0, "y": 0, "width": 10, "height": 10}
        self.attributes = dict(attributes or {})
        self.clicks = 0
        self.typed: List[str] = []

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return self.enabled

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def click(self) -> None:
        self.clicks += 1

    def clear(self) -> None:
        self.typed.clear()

    def send_keys(self, text: str) -> None:
        self.typed.append(text)


class FakeDriver:
    """Answers find_elements from a (by, value) -> elements map."""

    def __init__(self, ready_state: str = "complete", title: str = "Swag Labs"):
        self.ready_state = ready_state
        self.title = title
        self.elements: Dict[Tuple[str, str], List[FakeElement]] = {}
        self.screenshot = b""
        self.current_url = "about:blank"
        self.visited: List[str] = []

    def add(self, locator, *elements: FakeElement) -> None:
        self.elements[tuple(locator)] = list(elements)

    def find_elements(self, by: str, value: str) -> List[FakeElement]:
        return list(self.elements.get((by, value), []))

    def find_element(self, by: str, value: str) -> FakeElement:
        found = self.find_elements(by, value)
        if not found:
            raise NoSuchElementException(f"{by}={value}")
        return found[0]

    def execute_script(self, script: str, *args):
        if "readyState" in script:
            return self.ready_state
        return None

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = url

    def get_screenshot_as_png(self) -> bytes:
        return self.screenshot


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(wait_helpers, "time", fake)
    monkeypatch.setattr(retry, "time", fake)
    return fake


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def element_factory():
    return FakeElement


@pytest.fixture(autouse=True)
def _fresh_config_loader():
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()

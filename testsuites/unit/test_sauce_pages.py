import pytest

from testsuites.ui_testing.framework.settings import FrameworkSettings
from testsuites.ui_testing.pages.inventory_page import (
    INVENTORY_CONTAINER,
    INVENTORY_ITEM,
    INVENTORY_LIST,
    SORT_DROPDOWN,
    InventoryPage,
)
from testsuites.ui_testing.pages.login_page import (
    ERROR_MESSAGE,
    PASSWORD_INPUT,
    USERNAME_INPUT,
    LoginPage,
)
from testsuites.ui_testing.framework.locators import by_id


@pytest.fixture
def framework(tmp_path):
    return FrameworkSettings(default_timeout=1, artifacts_dir=str(tmp_path))


def _render_login(driver, element_factory):
    driver.add(USERNAME_INPUT, element_factory())
    driver.add(PASSWORD_INPUT, element_factory())
    driver.add(by_id("login-button"), element_factory())


def _render_inventory(driver, element_factory, items=6, dropdown_enabled=True):
    driver.add(SORT_DROPDOWN, element_factory(enabled=dropdown_enabled))
    driver.add(INVENTORY_CONTAINER, element_factory())
    driver.add(INVENTORY_LIST, element_factory())
    driver.add(INVENTORY_ITEM, *[element_factory() for _ in range(items)])


def test_login_page_ready_with_fallback_button(clock, driver, framework, element_factory):
    _render_login(driver, element_factory)

    page = LoginPage(driver, framework=framework).open()

    assert page.is_ready
    assert driver.visited == ["https://www.saucedemo.com/"]
    assert not page.has_error()


def test_login_page_requires_title(clock, driver, framework, element_factory):
    _render_login(driver, element_factory)
    driver.title = "Loading..."

    assert not LoginPage(driver, framework=framework).ensure_ready().ready


def test_login_error_message(clock, driver, framework, element_factory):
    _render_login(driver, element_factory)
    driver.add(ERROR_MESSAGE, element_factory(text="Epic sadface: Sorry, this user has been locked out."))

    page = LoginPage(driver, framework=framework)

    assert page.has_error()
    assert "locked out" in page.get_error_message()


def test_inventory_ready_needs_products(clock, driver, framework, element_factory):
    _render_inventory(driver, element_factory, items=0)

    result = InventoryPage(driver, framework=framework).ensure_ready()

    assert not result.ready
    assert result.error.stage == "additional-conditions"


def test_inventory_ready_needs_enabled_dropdown(clock, driver, framework, element_factory):
    _render_inventory(driver, element_factory, dropdown_enabled=False)

    assert not InventoryPage(driver, framework=framework).ensure_ready().ready


def test_inventory_counts(clock, driver, framework, element_factory):
    _render_inventory(driver, element_factory, items=6)
    page = InventoryPage(driver, framework=framework)

    assert page.ensure_ready().ready
    assert page.item_count() == 6
    assert page.cart_count() == 0

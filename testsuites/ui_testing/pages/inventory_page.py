"""
================================================================================
Inventory Page Object (SauceDemo)
================================================================================

Product listing shown after login.

Ready when the sort dropdown, inventory container and list are visible, the
dropdown is enabled and at least one product is rendered.

================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import List

import allure
from loguru import logger
from selenium.webdriver.support.select import Select

from testsuites.ui_testing.framework.conditions import element_count_at_least
from testsuites.ui_testing.framework.locators import css, data_test, group
from testsuites.ui_testing.framework.page_base import BasePage


# Element map
SORT_DROPDOWN = data_test("product-sort-container", name="sort_dropdown")
INVENTORY_CONTAINER = data_test("inventory-container", name="inventory_container")
INVENTORY_LIST = data_test("inventory-list", name="inventory_list")
INVENTORY_ITEM = data_test("inventory-item", name="inventory_item")
ITEM_NAME = css(".inventory_item_name", name="item_name")
ITEM_PRICE = css(".inventory_item_price", name="item_price")
HEADER = group("header", data_test("primary-header"), css(".primary_header"))
CART_BADGE = group("cart_badge", data_test("shopping-cart-badge"), css(".shopping_cart_badge"))


class SortOption(str, Enum):
    """Values of the product sort dropdown."""
    NAME_ASC = "az"
    NAME_DESC = "za"
    PRICE_ASC = "lohi"
    PRICE_DESC = "hilo"


def _add_to_cart_button(item_name: str):
    slug = item_name.strip().lower().replace(" ", "-")
    return data_test(f"add-to-cart-{slug}", name=f"add_to_cart[{item_name}]")


class InventoryPage(BasePage):
    """SauceDemo inventory (product list) page."""

    URL_PATH = "/inventory.html"
    PAGE_TITLE = "Swag Labs"
    CRITICAL_ELEMENTS = (SORT_DROPDOWN, INVENTORY_CONTAINER, INVENTORY_LIST)

    def additional_readiness_conditions(self):
        def sort_dropdown_enabled(driver) -> bool:
            return driver.find_element(*SORT_DROPDOWN).is_enabled()

        return [sort_dropdown_enabled, element_count_at_least(INVENTORY_ITEM, 1)]

    def item_count(self) -> int:
        return len(self.find_all(INVENTORY_ITEM))

    def item_names(self) -> List[str]:
        return [element.text for element in self.find_all(ITEM_NAME)]

    def item_prices(self) -> List[float]:
        return [float(element.text.strip().lstrip("$")) for element in self.find_all(ITEM_PRICE)]

    def sort_by(self, option: SortOption) -> "InventoryPage":
        """Select a sort order and wait until the dropdown reflects it."""
        option = SortOption(option)
        with allure.step(f"Sort products by '{option.value}'"):
            self.retry.execute(
                lambda: Select(self.find(SORT_DROPDOWN)).select_by_value(option.value),
                description=f"{self.page_name}: sort by {option.value}",
            )
            self.wait_for(
                lambda driver: Select(driver.find_element(*SORT_DROPDOWN))
                .first_selected_option.get_attribute("value") == option.value,
                description=f"sort option '{option.value}' applied",
            )
            logger.info(f"Products sorted by '{option.value}'")
        return self

    def selected_sort_value(self) -> str:
        return Select(self.find(SORT_DROPDOWN)).first_selected_option.get_attribute("value")

    def add_item_to_cart(self, item_name: str) -> "InventoryPage":
        with allure.step(f"Add '{item_name}' to cart"):
            self.click(_add_to_cart_button(item_name))
        return self

    def cart_count(self) -> int:
        """Number shown on the cart badge; 0 when the badge is absent."""
        if not self.is_visible(CART_BADGE):
            return 0
        return int(self.get_text(CART_BADGE))


__all__ = [
    "InventoryPage",
    "SortOption",
    "SORT_DROPDOWN",
    "INVENTORY_CONTAINER",
    "INVENTORY_LIST",
    "INVENTORY_ITEM",
    "HEADER",
    "CART_BADGE",
]

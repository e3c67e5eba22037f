"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for SauceDemo pages.

Each page class encapsulates:
    - Element map (Locators and LocatorGroups)
    - Critical elements and extra readiness conditions
    - Page-specific actions

Author: Automation Team
License: MIT
================================================================================
"""

from .inventory_page import InventoryPage, SortOption
from .login_page import LoginPage

__all__ = [
    "LoginPage",
    "InventoryPage",
    "SortOption",
]

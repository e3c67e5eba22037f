"""
================================================================================
UI Test Tools
================================================================================

Shared infrastructure used by the UI test framework and the test runner.

Modules:
    - common: Logger initialisation and filesystem helpers
    - report_tools: Allure attachment helpers and report generation

Example:
    from uitest_tools.common import init_logger
    from uitest_tools.report_tools import attach_image_file

    init_logger(level="DEBUG", log_file="logs/ui.log")
    attach_image_file("artifacts/visual_actuals/login.png", name="Actual")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]

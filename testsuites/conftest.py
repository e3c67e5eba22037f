"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers, skips live browser tests without ``--run-ui``
and adds the report header.

================================================================================
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests that need no browser"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Live browser tests, enabled with --run-ui"
    )
    config.addinivalue_line(
        "markers", "visual: Visual regression tests"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds domain markers from the test location and skips live browser
    tests unless ``--run-ui`` is given.
    """
    run_ui = config.getoption("--run-ui")
    skip_ui = pytest.mark.skip(reason="live browser test; pass --run-ui to run")

    for item in items:
        parts = Path(str(item.fspath)).parts

        if "unit" in parts:
            item.add_marker(pytest.mark.unit)

        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            if "visual" in item.name:
                item.add_marker(pytest.mark.visual)
            if not run_ui:
                item.add_marker(skip_ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Selenium UI Test Framework",
        f"Live UI tests: {'enabled' if config.getoption('--run-ui') else 'disabled (--run-ui)'}",
        "=" * 60,
        "",
    ]

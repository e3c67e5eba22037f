"""
Repository-level pytest configuration.

Provides:
  - Safe defaults for the public SauceDemo environment (no secrets embedded)
  - The --run-ui switch for live browser tests
  - Logger initialization for every run
  - A clean ConfigLoader singleton per test session

Values below are the public SauceDemo demo credentials. Real projects should
load secrets from a secure secret manager in CI/CD.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from testsuites.ui_testing.framework.config_loader import ConfigLoader
from uitest_tools.common import init_logger


def pytest_addoption(parser):
    """Register command line options."""
    parser.addoption(
        "--run-ui",
        action="store_true",
        default=False,
        help="Run live browser tests (testsuites/ui_testing)",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set demo-safe environment defaults if not already provided by the user/CI.

    This keeps local runs predictable.
    """
    defaults = {
        "UI_USERNAME": "standard_user",
        "UI_PASSWORD": "secret_sauce",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    config = ConfigLoader()
    init_logger(
        level=config.get("logging.level", "INFO"),
        log_file=config.get("logging.file") or None,
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "7 days"),
    )
    yield
    ConfigLoader.reset()

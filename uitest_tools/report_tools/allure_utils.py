"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports from UI tests.

Features:
- Text / JSON / PNG attachment helpers
- Step decorator for plain functions
- HTML report generation via the Allure CLI

Attachments are best-effort: a failure to attach is logged as a warning and
never fails the test that produced it.

================================================================================
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Optional, Union

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def _attach(body: Any, name: str, attachment_type: Any) -> bool:
    try:
        allure.attach(body, name=name, attachment_type=attachment_type)
        return True
    except Exception as e:
        logger.warning(f"Failed to attach '{name}' to Allure report: {e}")
        return False


def attach_json(data: Any, name: str = "Data") -> bool:
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    return _attach(json_str, name, allure.attachment_type.JSON)


def attach_text(text: str, name: str = "Text") -> bool:
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    return _attach(text, name, allure.attachment_type.TEXT)


def attach_png(data: bytes, name: str = "Screenshot") -> bool:
    """Attach in-memory PNG bytes to Allure report."""
    return _attach(data, name, allure.attachment_type.PNG)


def attach_image_file(path: Union[str, Path], name: Optional[str] = None) -> bool:
    """
    Attach a PNG file from disk to Allure report.

    Args:
        path: Image file path
        name: Attachment name (defaults to the file name)

    Returns:
        True if attached, False if the file is missing or attaching failed
    """
    image_path = Path(path)
    if not image_path.is_file():
        logger.warning(f"Cannot attach missing image: {image_path}")
        return False
    return attach_png(image_path.read_bytes(), name or image_path.name)


# ================================================================================
# Decorators
# ================================================================================

def allure_step(step_name: str):
    """
    Decorator to wrap function as Allure step.

    Args:
        step_name: Step name for report
    """
    def decorator(func):
        def wrapper(*args, **kwargs):
            with allure.step(step_name):
                return func(*args, **kwargs)

        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_allure_report(
    results_dir: Union[str, Path],
    output_dir: Union[str, Path],
    open_report: bool = False,
) -> bool:
    """
    Generate Allure HTML report from results.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Report output directory
        open_report: Whether to open report in browser

    Returns:
        True if successful
    """
    try:
        subprocess.run(
            ["allure", "generate", str(results_dir), "-o", str(output_dir), "--clean"],
            check=True,
        )
    except FileNotFoundError:
        logger.warning("Allure CLI not found. Please install Allure to generate reports.")
        return False
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to generate Allure report: {e}")
        return False

    logger.info(f"Report generated: {output_dir}")
    if open_report:
        subprocess.run(["allure", "open", str(output_dir)])
    return True

"""Allure reporting helpers."""

from .allure_utils import (
    allure_step,
    attach_image_file,
    attach_json,
    attach_png,
    attach_text,
    generate_allure_report,
)

__all__ = [
    "allure_step",
    "attach_image_file",
    "attach_json",
    "attach_png",
    "attach_text",
    "generate_allure_report",
]

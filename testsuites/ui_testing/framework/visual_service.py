"""
================================================================================
Visual Test Service
================================================================================

Screenshot-based visual assertions for UI tests.

Captures the viewport (optionally cropped to an element or a rectangle),
keeps the capture under ``<artifacts_dir>/visual_actuals/``, runs the
VisualComparator and attaches actual, baseline and diff images to Allure.

Visual assertions are never retried: a structural mismatch (missing
baseline, different dimensions) propagates as-is, and a pixel mismatch
beyond tolerance raises VisualMismatchError (an AssertionError).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple

import allure
from loguru import logger
from PIL import Image

from uitest_tools.report_tools import attach_image_file

from .exceptions import VisualMismatchError
from .settings import FrameworkSettings, VisualTestSettings, load_settings
from .visual_comparator import ComparisonResult, VisualComparator, sanitize_baseline_name


# (left, top, width, height) in screenshot pixels
CropArea = Tuple[int, int, int, int]

ACTUALS_SUBDIR = "visual_actuals"


def _intersect(area: CropArea, image_size: Tuple[int, int]) -> Optional[Tuple[int, int, int, int]]:
    """Clip a crop area to the image; returns a PIL box or None if empty."""
    left, top, width, height = area
    right = min(left + width, image_size[0])
    bottom = min(top + height, image_size[1])
    left, top = max(left, 0), max(top, 0)
    if right <= left or bottom <= top:
        return None
    return (left, top, right, bottom)


def element_crop_area(element: Any) -> CropArea:
    """Crop area covering a WebElement's bounding rectangle."""
    rect = element.rect
    return (
        int(round(rect["x"])),
        int(round(rect["y"])),
        int(round(rect["width"])),
        int(round(rect["height"])),
    )


class VisualTestService:
    """
    Visual assertion entry point used by tests.

    Example:
        service = VisualTestService(settings.visual, settings.framework)
        service.assert_visual_match(driver, "chrome/inventory/header",
                                    element=inventory.find(HEADER))
    """

    def __init__(
        self,
        settings: Optional[VisualTestSettings] = None,
        framework: Optional[FrameworkSettings] = None,
        comparator: Optional[VisualComparator] = None,
    ):
        if settings is None or framework is None:
            configured = load_settings()
            settings = settings or configured.visual
            framework = framework or configured.framework
        self.settings = settings
        self.framework = framework
        self.comparator = comparator or VisualComparator(self.settings)
        self.actuals_dir = Path(self.framework.artifacts_dir) / ACTUALS_SUBDIR
        logger.debug(
            f"VisualTestService initialized. Baseline dir: {self.comparator.baseline_dir}, "
            f"auto-create: {self.settings.auto_create_baseline_if_missing}"
        )

    def capture(
        self,
        driver: Any,
        element: Any = None,
        crop: Optional[CropArea] = None,
    ) -> Image.Image:
        """
        Take a screenshot, cropped to an element or an explicit area.

        Raises:
            ValueError: If the crop area does not intersect the screenshot
        """
        png = driver.get_screenshot_as_png()
        with Image.open(io.BytesIO(png)) as raw:
            image = raw.convert("RGBA")
        logger.debug(f"Screenshot captured: {image.width}x{image.height}")

        area = element_crop_area(element) if element is not None else crop
        if area is None:
            return image

        box = _intersect(area, image.size)
        if box is None:
            raise ValueError(
                f"Crop area {area} is empty after intersection with image bounds "
                f"{image.width}x{image.height}"
            )
        logger.debug(f"Cropping screenshot to {box}")
        return image.crop(box)

    def save_actual(self, image: Image.Image, baseline_name: str) -> Path:
        """Persist the capture for debugging and reporting."""
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S-%f")
        path = self.actuals_dir / f"{sanitize_baseline_name(baseline_name)}_actual_{stamp}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path, format="PNG")
        logger.debug(f"Actual image saved: {path}")
        return path

    def assert_visual_match(
        self,
        driver: Any,
        baseline_name: str,
        element: Any = None,
        crop: Optional[CropArea] = None,
        tolerance_percent: Optional[float] = None,
    ) -> ComparisonResult:
        """
        Assert the current page (or part of it) matches its baseline.

        Args:
            driver: Selenium WebDriver
            baseline_name: Baseline key, e.g. "chrome/login/form"
            element: WebElement to crop to (takes precedence over ``crop``)
            crop: (left, top, width, height) area to crop to
            tolerance_percent: Override of the configured default tolerance

        Returns:
            ComparisonResult of a passing comparison

        Raises:
            VisualMismatchError: If the pixel difference exceeds tolerance
            BaselineMissingError: If absent and auto-creation is disabled
            DimensionMismatchError: If capture and baseline sizes differ
        """
        with allure.step(f"Visual check: {baseline_name}"):
            image = self.capture(driver, element=element, crop=crop)
            actual_path = self.save_actual(image, baseline_name)
            attach_image_file(actual_path, name=f"Actual - {baseline_name}")

            result = self.comparator.compare(image, baseline_name, tolerance_percent=tolerance_percent)

            if result.baseline_path is not None:
                label = "Baseline (NEW)" if result.baseline_created else "Baseline"
                attach_image_file(result.baseline_path, name=f"{label} - {baseline_name}")

            if not result.passed:
                if result.diff_artifact_path is not None:
                    attach_image_file(result.diff_artifact_path, name=f"Difference - {baseline_name}")
                raise VisualMismatchError(baseline_name, result)

            logger.info(
                f"Visual match for '{baseline_name}': {result.diff_percent:.4f}% "
                f"within tolerance {result.tolerance_percent}%"
            )
            return result


__all__ = [
    "CropArea",
    "VisualTestService",
    "element_crop_area",
]

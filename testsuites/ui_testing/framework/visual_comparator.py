"""
================================================================================
Visual Regression Comparator
================================================================================

Compares a captured screenshot with a named baseline under a pixel
tolerance.

Pixel policy (stable):
    A pixel differs when any RGBA channel differs by more than
    ``pixel_threshold`` (0 by default, i.e. exact equality).
    diff_percent = differing_pixels * 100 / total_pixels
    The comparison passes iff diff_percent <= tolerance_percent.

Baseline store layout:
    <baseline_directory>/<name>.png         baseline
    <baseline_directory>/<name>.diff.png    diff artifact of the last failure
    <baseline_directory>/<name>.png.lock    creation lock

A baseline is only ever written by the missing-baseline path (or removed by
``reset_baseline``). First-run creation is serialised across processes with
a file lock and the existence check is repeated under the lock, so a second
session compares against the baseline the first one wrote.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import io
import os
import re
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from filelock import FileLock
from loguru import logger
from PIL import Image

from .exceptions import BaselineMissingError, DimensionMismatchError
from .settings import VisualTestSettings, load_settings


ImageSource = Union[bytes, bytearray, str, Path, Image.Image]

BASELINE_SUFFIX = ".png"
DIFF_SUFFIX = ".diff.png"
LOCK_SUFFIX = ".lock"
_RESERVED_NAME_SUFFIX = DIFF_SUFFIX[: -len(BASELINE_SUFFIX)]

# Characters not allowed in file names on common platforms
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"\\|?*\x00-\x1f]')

# Diff artifact rendering
DIFF_HIGHLIGHT = (255, 0, 0)


class BaselineCreatedWarning(UserWarning):
    """Emitted when a missing baseline is created from the current capture."""


@dataclass(frozen=True)
class ComparisonResult:
    """
    Outcome of one visual comparison.

    Attributes:
        passed: True when diff_percent is within tolerance
        diff_percent: Percentage of differing pixels (0-100)
        diff_artifact_path: Diff image written for a failed comparison
        baseline_path: Baseline the capture was compared with (or created as)
        baseline_created: True when this call created the baseline
        differing_pixels: Number of differing pixels
        total_pixels: Number of pixels compared
        tolerance_percent: Tolerance the comparison was judged against
    """
    passed: bool
    diff_percent: float
    diff_artifact_path: Optional[Path] = None
    baseline_path: Optional[Path] = None
    baseline_created: bool = False
    differing_pixels: int = 0
    total_pixels: int = 0
    tolerance_percent: float = 0.0


def sanitize_baseline_name(name: str) -> str:
    """
    Make a baseline name safe for the filesystem.

    ``/`` separates sub-directories; invalid characters and path-traversal
    segments are replaced by ``_``. Names ending in ``.diff`` are rejected:
    that file name belongs to the diff artifact of another baseline.
    """
    segments = []
    for segment in name.replace("\\", "/").split("/"):
        segment = _INVALID_FILENAME_CHARS.sub("_", segment.strip())
        if not segment:
            continue
        if set(segment) == {"."}:
            segment = "_"
        segments.append(segment.rstrip("."))
    cleaned = "/".join(s for s in segments if s)
    if not cleaned:
        raise ValueError(f"Invalid baseline name: {name!r}")
    if cleaned.lower().endswith(_RESERVED_NAME_SUFFIX):
        raise ValueError(
            f"Invalid baseline name: {name!r} ends with reserved suffix '{_RESERVED_NAME_SUFFIX}'"
        )
    return cleaned


def load_image(source: ImageSource) -> Image.Image:
    """Load PNG bytes, an image file or a PIL image as an RGBA image."""
    if isinstance(source, Image.Image):
        return source.convert("RGBA")
    if isinstance(source, (bytes, bytearray)):
        with Image.open(io.BytesIO(bytes(source))) as img:
            return img.convert("RGBA")
    with Image.open(Path(source)) as img:
        return img.convert("RGBA")


def difference_mask(baseline: Image.Image, actual: Image.Image, pixel_threshold: int = 0) -> np.ndarray:
    """Boolean HxW mask of pixels whose max channel delta exceeds the threshold."""
    a = np.asarray(baseline.convert("RGBA"), dtype=np.int16)
    b = np.asarray(actual.convert("RGBA"), dtype=np.int16)
    return np.abs(a - b).max(axis=2) > pixel_threshold


def render_diff(baseline: Image.Image, mask: np.ndarray) -> Image.Image:
    """Baseline dimmed to grey with differing pixels painted red."""
    grey = np.asarray(baseline.convert("L"), dtype=np.uint16)
    dimmed = (grey // 2 + 64).astype(np.uint8)
    canvas = np.repeat(dimmed[:, :, np.newaxis], 3, axis=2)
    canvas[mask] = DIFF_HIGHLIGHT
    return Image.fromarray(canvas)


def _save_png_atomically(image: Image.Image, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.{os.getpid()}.tmp")
    try:
        image.save(tmp_path, format="PNG")
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class VisualComparator:
    """
    Tolerance-bounded screenshot comparator backed by a baseline directory.

    Example:
        comparator = VisualComparator(settings.visual)
        result = comparator.compare(driver.get_screenshot_as_png(), "chrome/login/form")
        assert result.passed, result.diff_artifact_path
    """

    def __init__(self, settings: Optional[VisualTestSettings] = None, root_dir: Optional[Path] = None):
        """
        Initialize comparator.

        Args:
            settings: Visual test settings (loaded from configuration if None)
            root_dir: Base for a relative ``baseline_directory``; the
                current working directory if None
        """
        self.settings = settings or load_settings().visual
        baseline_dir = Path(self.settings.baseline_directory)
        if not baseline_dir.is_absolute() and root_dir is not None:
            baseline_dir = Path(root_dir) / baseline_dir
        self.baseline_dir = baseline_dir

    # ------------------------------------------------------------------
    # Baseline store
    # ------------------------------------------------------------------

    def baseline_path(self, baseline_name: str) -> Path:
        return self.baseline_dir / f"{sanitize_baseline_name(baseline_name)}{BASELINE_SUFFIX}"

    def diff_path(self, baseline_name: str) -> Path:
        return self.baseline_dir / f"{sanitize_baseline_name(baseline_name)}{DIFF_SUFFIX}"

    def lock_path(self, baseline_name: str) -> Path:
        baseline = self.baseline_path(baseline_name)
        return baseline.with_name(baseline.name + LOCK_SUFFIX)

    def has_baseline(self, baseline_name: str) -> bool:
        return self.baseline_path(baseline_name).is_file()

    def reset_baseline(self, baseline_name: str) -> bool:
        """
        Delete a baseline and its diff artifact.

        Returns:
            True if a baseline existed and was removed
        """
        path = self.baseline_path(baseline_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(self.lock_path(baseline_name))):
            removed = path.is_file()
            if removed:
                path.unlink()
            diff = self.diff_path(baseline_name)
            if diff.is_file():
                diff.unlink()
        if removed:
            logger.info(f"Baseline reset: {path}")
        return removed

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(
        self,
        captured_image: ImageSource,
        baseline_name: str,
        tolerance_percent: Optional[float] = None,
        auto_create_if_missing: Optional[bool] = None,
        warn_on_create: Optional[bool] = None,
    ) -> ComparisonResult:
        """
        Compare a capture with the named baseline.

        Args:
            captured_image: PNG bytes, image path or PIL image
            baseline_name: Baseline key; ``/`` creates sub-directories
            tolerance_percent: Allowed differing pixels, 0-100
            auto_create_if_missing: Create the baseline when absent
            warn_on_create: Warn when a baseline is created

        Returns:
            ComparisonResult

        Raises:
            ValueError: If the tolerance is outside 0-100 or the name is invalid
            BaselineMissingError: If absent and auto-creation is disabled
            DimensionMismatchError: If capture and baseline sizes differ
        """
        settings = self.settings
        tolerance = (
            settings.default_comparison_tolerance_percent
            if tolerance_percent is None else float(tolerance_percent)
        )
        if not 0 <= tolerance <= 100:
            raise ValueError(f"tolerance_percent must be between 0 and 100, got {tolerance}")
        auto_create = (
            settings.auto_create_baseline_if_missing
            if auto_create_if_missing is None else auto_create_if_missing
        )
        warn = settings.warn_on_automatic_baseline_creation if warn_on_create is None else warn_on_create

        actual = load_image(captured_image)
        path = self.baseline_path(baseline_name)

        if not path.is_file():
            created = self._create_missing_baseline(actual, baseline_name, path, auto_create, warn, tolerance)
            if created is not None:
                return created

        return self._compare_with_baseline(actual, baseline_name, path, tolerance)

    def _create_missing_baseline(
        self,
        actual: Image.Image,
        baseline_name: str,
        path: Path,
        auto_create: bool,
        warn: bool,
        tolerance: float,
    ) -> Optional[ComparisonResult]:
        if not auto_create:
            raise BaselineMissingError(baseline_name, path)

        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(self.lock_path(baseline_name))):
            if path.is_file():
                logger.info(f"Baseline for '{baseline_name}' appeared while waiting for lock; comparing")
                return None
            _save_png_atomically(actual, path)

        logger.info(f"New baseline image created: {path}")
        if warn:
            message = (
                f"New visual baseline created for '{baseline_name}' at '{path}'. "
                f"Review and commit if correct."
            )
            logger.warning(message)
            warnings.warn(message, BaselineCreatedWarning, stacklevel=3)

        total = actual.width * actual.height
        return ComparisonResult(
            passed=True,
            diff_percent=0.0,
            baseline_path=path,
            baseline_created=True,
            total_pixels=total,
            tolerance_percent=tolerance,
        )

    def _compare_with_baseline(
        self,
        actual: Image.Image,
        baseline_name: str,
        path: Path,
        tolerance: float,
    ) -> ComparisonResult:
        baseline = load_image(path)
        if baseline.size != actual.size:
            raise DimensionMismatchError(baseline_name, baseline.size, actual.size)

        mask = difference_mask(baseline, actual, self.settings.pixel_threshold)
        differing = int(mask.sum())
        total = actual.width * actual.height
        diff_percent = differing * 100.0 / total if total else 0.0
        passed = diff_percent <= tolerance

        logger.info(
            f"Comparison for '{baseline_name}': pixel error={diff_percent:.4f}% "
            f"({differing}/{total}), tolerance={tolerance}%"
        )

        diff_artifact: Optional[Path] = None
        if not passed:
            diff_artifact = self.diff_path(baseline_name)
            _save_png_atomically(render_diff(baseline, mask), diff_artifact)
            logger.warning(
                f"Visual mismatch for '{baseline_name}': {diff_percent:.4f}% > {tolerance}%. "
                f"Diff image: {diff_artifact}"
            )

        return ComparisonResult(
            passed=passed,
            diff_percent=diff_percent,
            diff_artifact_path=diff_artifact,
            baseline_path=path,
            differing_pixels=differing,
            total_pixels=total,
            tolerance_percent=tolerance,
        )


__all__ = [
    "BaselineCreatedWarning",
    "ComparisonResult",
    "ImageSource",
    "VisualComparator",
    "sanitize_baseline_name",
    "load_image",
    "difference_mask",
    "render_diff",
]

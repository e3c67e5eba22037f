import io

import pytest
from PIL import Image

from testsuites.ui_testing.framework.exceptions import DimensionMismatchError, VisualMismatchError
from testsuites.ui_testing.framework.settings import FrameworkSettings, VisualTestSettings
from testsuites.ui_testing.framework.visual_service import (
    ACTUALS_SUBDIR,
    VisualTestService,
    element_crop_area,
)


def _screenshot(width=20, height=10, color=(255, 255, 255, 255)):
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def service(tmp_path):
    return VisualTestService(
        VisualTestSettings(
            baseline_directory=str(tmp_path / "baselines"),
            warn_on_automatic_baseline_creation=False,
        ),
        FrameworkSettings(artifacts_dir=str(tmp_path / "artifacts")),
    )


def test_capture_full_viewport(service, driver):
    driver.screenshot = _screenshot(20, 10)

    image = service.capture(driver)

    assert image.size == (20, 10)
    assert image.mode == "RGBA"


def test_capture_crops_to_element(service, driver, element_factory):
    driver.screenshot = _screenshot(20, 10)
    header = element_factory(rect={"x": 2.4, "y": 1, "width": 5, "height": 3})

    assert element_crop_area(header) == (2, 1, 5, 3)
    assert service.capture(driver, element=header).size == (5, 3)


def test_capture_clips_crop_to_image_bounds(service, driver):
    driver.screenshot = _screenshot(20, 10)

    assert service.capture(driver, crop=(15, 5, 100, 100)).size == (5, 5)


def test_capture_rejects_crop_outside_image(service, driver):
    driver.screenshot = _screenshot(20, 10)

    with pytest.raises(ValueError, match="empty after intersection"):
        service.capture(driver, crop=(50, 50, 10, 10))


def test_first_run_creates_baseline_and_keeps_actual(service, driver, tmp_path):
    driver.screenshot = _screenshot()

    result = service.assert_visual_match(driver, "chrome/login/page")

    assert result.passed and result.baseline_created
    actuals = list((tmp_path / "artifacts" / ACTUALS_SUBDIR / "chrome" / "login").glob("page_actual_*.png"))
    assert len(actuals) == 1


def test_mismatch_raises_assertion_error(service, driver):
    driver.screenshot = _screenshot(color=(255, 255, 255, 255))
    service.assert_visual_match(driver, "inventory")

    driver.screenshot = _screenshot(color=(0, 0, 0, 255))
    with pytest.raises(VisualMismatchError) as exc_info:
        service.assert_visual_match(driver, "inventory", tolerance_percent=1)

    assert isinstance(exc_info.value, AssertionError)
    assert exc_info.value.result.diff_percent == pytest.approx(100.0)
    assert exc_info.value.result.diff_artifact_path.is_file()
    assert "exceeded tolerance" in str(exc_info.value)


def test_dimension_mismatch_is_not_an_assertion(service, driver):
    driver.screenshot = _screenshot(20, 10)
    service.assert_visual_match(driver, "cart")

    driver.screenshot = _screenshot(30, 10)
    with pytest.raises(DimensionMismatchError):
        service.assert_visual_match(driver, "cart")


def test_bare_service_uses_configured_directories(monkeypatch, tmp_path):
    monkeypatch.setenv("VISUAL_BASELINE_DIRECTORY", str(tmp_path / "configured_baselines"))
    monkeypatch.setenv("VISUAL_DEFAULT_COMPARISON_TOLERANCE_PERCENT", "1.5")
    monkeypatch.setenv("FRAMEWORK_ARTIFACTS_DIR", str(tmp_path / "configured_artifacts"))

    service = VisualTestService()

    assert service.comparator.baseline_dir == tmp_path / "configured_baselines"
    assert service.settings.default_comparison_tolerance_percent == 1.5
    assert service.actuals_dir == tmp_path / "configured_artifacts" / ACTUALS_SUBDIR

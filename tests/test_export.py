"""
Tests for export planning: filename, capture ladder, retries, guard, settings.
"""

import datetime

import pytest

from export.capture import (
    capture_scale,
    capture_scale_ladder,
    capture_with_fallback,
    capture_with_fallback_async,
    jpeg_quality,
    options_for,
    pixel_budget,
)
from export.filename import build_pdf_filename
from export.guard import ExportGuard, ExportInProgressError
from export.plan import plan_export
from export.settings import ExportSettings
from models.export import CaptureOptions


class TestFilename:
    def test_format(self, export_day):
        assert build_pdf_filename("Acme Advisors", export_day) == (
            "Acme Advisors - Proposals - 03-05-2026.pdf"
        )

    def test_unsafe_characters_replaced(self, export_day):
        assert build_pdf_filename('Acme/Partners: "LLC"?', export_day) == (
            "Acme-Partners- -LLC-- - Proposals - 03-05-2026.pdf"
        )

    @pytest.mark.parametrize("firm", [None, "", "   "])
    def test_default_firm(self, firm, export_day):
        assert build_pdf_filename(firm, export_day) == "Firm - Proposals - 03-05-2026.pdf"


class TestCaptureScale:
    @pytest.mark.parametrize(
        "memory, budget",
        [(None, 4_000_000), (1, 2_500_000), (2, 2_500_000), (4, 4_000_000), (8, 6_000_000)],
    )
    def test_pixel_budget(self, memory, budget):
        assert pixel_budget(memory) == budget

    def test_requested_scale_within_budget(self):
        assert capture_scale(1000, 800) == 2.0

    def test_budget_limits_scale(self):
        assert capture_scale(1500, 1500) == pytest.approx((4_000_000 / 2_250_000) ** 0.5)

    def test_never_below_one(self):
        assert capture_scale(2000, 2000, device_memory_gb=2) == 1.0

    def test_ladder(self):
        assert capture_scale_ladder(2.0) == pytest.approx([2.0, 1.7, 1.4])
        assert capture_scale_ladder(1.0) == pytest.approx([1.0, 0.85, 0.8])

    def test_ladder_dedupes_floor(self):
        assert capture_scale_ladder(0.9) == pytest.approx([0.9, 0.8])

    def test_jpeg_quality(self):
        assert jpeg_quality(0.85) == 0.9
        assert jpeg_quality(1.0) == 0.95


@pytest.fixture
def plan(settings, export_day):
    return plan_export(1000, 800, firm_name="Acme", today=export_day, settings=settings)


class TestPlan:
    def test_plan(self, plan):
        assert plan.filename == "Acme - Proposals - 03-05-2026.pdf"
        assert plan.printable_height_px == 756
        assert plan.margins_mm == (8.0, 8.0, 8.0, 8.0)
        assert plan.page.orientation == "landscape"
        assert plan.capture_scales == pytest.approx([2.0, 1.7, 1.4])

    def test_firm_falls_back_to_settings(self, export_day):
        plan = plan_export(
            10, 10, today=export_day, settings=ExportSettings(firm_name="Default Co")
        )
        assert plan.filename.startswith("Default Co - Proposals")

    def test_low_memory_device(self, settings):
        plan = plan_export(2000, 2000, device_memory_gb=2, settings=settings)
        assert plan.capture_scales == pytest.approx([1.0, 0.85, 0.8])

    def test_options_for(self, plan):
        options = options_for(plan, 0.85)
        assert options.scale == 0.85
        assert options.jpeg_quality == 0.9
        assert options.page == plan.page
        assert options.filename == plan.filename


class TestCaptureWithFallback:
    """Retry ladder around the injected rasterizer."""

    def test_first_attempt_succeeds(self, plan):
        seen: list[CaptureOptions] = []

        def render(options):
            seen.append(options)
            return b"%PDF"

        assert capture_with_fallback(render, plan) == b"%PDF"
        assert [o.scale for o in seen] == [plan.capture_scales[0]]

    def test_falls_back_to_lower_scales(self, plan):
        scales = []

        def render(options):
            scales.append(options.scale)
            if len(scales) < 3:
                raise MemoryError("canvas too large")
            return "saved"

        assert capture_with_fallback(render, plan) == "saved"
        assert scales == plan.capture_scales

    def test_reraises_last_error(self, plan):
        def render(options):
            raise RuntimeError(f"failed at {options.scale}")

        with pytest.raises(RuntimeError, match=f"failed at {plan.capture_scales[-1]}"):
            capture_with_fallback(render, plan)

    @pytest.mark.asyncio
    async def test_async_fallback(self, plan):
        scales = []

        async def render(options):
            scales.append(options.scale)
            if len(scales) == 1:
                raise RuntimeError("tainted canvas")
            return "saved"

        assert await capture_with_fallback_async(render, plan) == "saved"
        assert scales == plan.capture_scales[:2]

    @pytest.mark.asyncio
    async def test_async_reraises(self, plan):
        async def render(options):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            await capture_with_fallback_async(render, plan)


class TestExportGuard:
    def test_blocks_reentry(self):
        guard = ExportGuard()
        with guard:
            assert guard.active
            with pytest.raises(ExportInProgressError):
                with guard:
                    pass
        assert not guard.active

    def test_released_after_failure(self):
        guard = ExportGuard()
        with pytest.raises(RuntimeError):
            with guard:
                raise RuntimeError("export failed")
        assert not guard.active
        with guard:
            pass

    def test_guards_are_independent(self):
        first, second = ExportGuard(), ExportGuard()
        with first:
            with second:
                assert first.active and second.active

    @pytest.mark.asyncio
    async def test_async_context(self):
        guard = ExportGuard()
        async with guard:
            assert guard.active
        assert not guard.active


class TestSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in (
            "PRESENTER_PAGE_HEIGHT_MM",
            "PRESENTER_MARGINS_MM",
            "PRESENTER_CAPTURE_SCALE",
            "PRESENTER_FIRM_NAME",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        settings = ExportSettings.from_env()
        assert settings == ExportSettings()
        assert settings.page_height_mm == 215.9
        assert settings.margins_mm == (8.0, 8.0, 8.0, 8.0)
        assert settings.capture_scale == 2.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PRESENTER_PAGE_HEIGHT_MM", "279.4")
        monkeypatch.setenv("PRESENTER_MARGINS_MM", "10, 5, 10, 5")
        monkeypatch.setenv("PRESENTER_CAPTURE_SCALE", "1.5")
        monkeypatch.setenv("PRESENTER_FIRM_NAME", "Acme")
        settings = ExportSettings.from_env()
        assert settings.page_height_mm == 279.4
        assert settings.margins_mm == (10.0, 5.0, 10.0, 5.0)
        assert settings.capture_scale == 1.5
        assert settings.firm_name == "Acme"

    def test_single_margin_applies_to_all_sides(self, monkeypatch):
        monkeypatch.setenv("PRESENTER_MARGINS_MM", "12")
        assert ExportSettings.from_env().margins_mm == (12.0, 12.0, 12.0, 12.0)

    @pytest.mark.parametrize(
        "name, value",
        [
            ("PRESENTER_MARGINS_MM", "1,2"),
            ("PRESENTER_MARGINS_MM", "a,b,c,d"),
            ("PRESENTER_PAGE_HEIGHT_MM", "tall"),
            ("PRESENTER_CAPTURE_SCALE", "-1"),
        ],
    )
    def test_malformed_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError):
            ExportSettings.from_env()

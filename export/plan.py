"""Export plan: everything decided before the rasterizer runs.

Typical flow for the caller::

    budget = printable_height_px(settings.page_height_mm, settings.margins_mm)
    fit(cards, measure, budget)                 # shrink cards onto one page
    plan = plan_export(width_px, height_px)     # measured after fitting
    capture_with_fallback(rasterize, plan)
"""

from __future__ import annotations

import datetime
from typing import Optional

from export.capture import capture_scale, capture_scale_ladder
from export.filename import build_pdf_filename
from export.settings import ExportSettings
from layout.geometry import page_geometry, printable_height_px
from models.export import ExportPlan


def plan_export(
    width_px: float,
    height_px: float,
    *,
    firm_name: Optional[str] = None,
    device_memory_gb: Optional[float] = None,
    today: Optional[datetime.date] = None,
    settings: Optional[ExportSettings] = None,
) -> ExportPlan:
    """Build the export plan for content measured at *width_px* x *height_px*.

    *firm_name* falls back to ``settings.firm_name``, then to the default
    firm name used by ``build_pdf_filename()``.
    """
    settings = settings or ExportSettings.from_env()
    margins = settings.margins_mm
    page = page_geometry(width_px, height_px, margins)
    scale = capture_scale(
        page.width_px,
        page.height_px,
        requested=settings.capture_scale,
        device_memory_gb=device_memory_gb,
    )
    return ExportPlan(
        filename=build_pdf_filename(firm_name or settings.firm_name, today),
        printable_height_px=printable_height_px(settings.page_height_mm, margins),
        margins_mm=margins,
        page=page,
        capture_scales=capture_scale_ladder(scale),
    )

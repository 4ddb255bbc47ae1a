"""PDF export planning around an injected rasterizer."""

from export.capture import (
    capture_scale,
    capture_scale_ladder,
    capture_with_fallback,
    capture_with_fallback_async,
)
from export.filename import build_pdf_filename
from export.guard import ExportGuard, ExportInProgressError
from export.plan import plan_export
from export.settings import ExportSettings

__all__ = [
    "ExportGuard",
    "ExportInProgressError",
    "ExportSettings",
    "build_pdf_filename",
    "capture_scale",
    "capture_scale_ladder",
    "capture_with_fallback",
    "capture_with_fallback_async",
    "plan_export",
]

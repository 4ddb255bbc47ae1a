"""Public re-exports of all model types."""

from models.export import CaptureOptions, ExportPlan, Margins, Orientation, PageGeometry
from models.layout import ScaleResult
from models.request import ExportPlanRequest, RenderRequest
from models.response import RenderResponse

__all__ = [
    # Layout
    "ScaleResult",
    # Export
    "CaptureOptions",
    "ExportPlan",
    "Margins",
    "Orientation",
    "PageGeometry",
    # Request/Response
    "ExportPlanRequest",
    "RenderRequest",
    "RenderResponse",
]

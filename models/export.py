"""Export planning models: page geometry, per-attempt capture options, plan."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Orientation = Literal["portrait", "landscape"]

# top, right, bottom, left (mm)
Margins = tuple[float, float, float, float]


class PageGeometry(BaseModel):
    """Single-page PDF format sized to the content plus margins."""

    model_config = ConfigDict(frozen=True)

    width_px: int = Field(ge=1)
    height_px: int = Field(ge=1)
    width_mm: float
    height_mm: float
    orientation: Orientation


class CaptureOptions(BaseModel):
    """Everything the rasterizer needs for one capture attempt."""

    model_config = ConfigDict(frozen=True)

    filename: str
    scale: float = Field(gt=0.0)
    jpeg_quality: float = Field(gt=0.0, le=1.0)
    margins_mm: Margins
    page: PageGeometry
    enable_links: bool = True


class ExportPlan(BaseModel):
    """Filename, page format and capture-scale ladder for one export."""

    model_config = ConfigDict(frozen=True)

    filename: str
    printable_height_px: int = Field(ge=1)
    margins_mm: Margins
    page: PageGeometry
    capture_scales: list[float] = Field(min_length=1)

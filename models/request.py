"""Request bodies for the HTTP endpoints (strict validation, extra=forbid)."""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RenderRequest(BaseModel):
    """Body of ``POST /render``: stored rich text to clean."""

    model_config = ConfigDict(extra="forbid")

    html: str


class ExportPlanRequest(BaseModel):
    """Body of ``POST /export/plan``.

    ``width_px``/``height_px`` are the measured size of the print node after
    scale-to-fit.  ``device_memory_gb`` is the client's reported device
    memory, when known.
    """

    model_config = ConfigDict(extra="forbid")

    width_px: float = Field(gt=0)
    height_px: float = Field(gt=0)
    firm_name: Optional[str] = None
    device_memory_gb: Optional[float] = Field(default=None, gt=0)
    today: Optional[datetime.date] = None

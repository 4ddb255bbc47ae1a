"""Export settings read from the environment (``.env`` is loaded by ``main``)."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from layout.geometry import DEFAULT_MARGINS_MM, LETTER_LANDSCAPE_HEIGHT_MM
from models.export import Margins


def _parse_margins(raw: str) -> Margins:
    """Parse ``"top,right,bottom,left"`` (mm); a single value applies to all sides."""
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if len(parts) == 1:
        parts *= 4
    if len(parts) != 4:
        raise ValueError(f"PRESENTER_MARGINS_MM needs 1 or 4 values, got {raw!r}")
    top, right, bottom, left = (float(p) for p in parts)
    return (top, right, bottom, left)


class ExportSettings(BaseModel):
    """Page and capture defaults for PDF export."""

    model_config = ConfigDict(frozen=True)

    page_height_mm: float = Field(default=LETTER_LANDSCAPE_HEIGHT_MM, gt=0)
    margins_mm: Margins = DEFAULT_MARGINS_MM
    capture_scale: float = Field(default=2.0, gt=0)
    firm_name: str = ""

    @classmethod
    def from_env(cls) -> ExportSettings:
        """Build settings from ``PRESENTER_*`` variables, falling back to defaults.

        Raises:
            ValueError: If a variable is set to a malformed value.
        """
        margins = os.getenv("PRESENTER_MARGINS_MM")
        return cls(
            page_height_mm=float(
                os.getenv("PRESENTER_PAGE_HEIGHT_MM", LETTER_LANDSCAPE_HEIGHT_MM)
            ),
            margins_mm=_parse_margins(margins) if margins else DEFAULT_MARGINS_MM,
            capture_scale=float(os.getenv("PRESENTER_CAPTURE_SCALE", 2.0)),
            firm_name=os.getenv("PRESENTER_FIRM_NAME", ""),
        )

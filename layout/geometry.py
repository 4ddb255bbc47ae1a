"""Page geometry for single-page PDF export.

All on-screen measurements are CSS px at 96 dpi; page formats are in mm.
"""

from __future__ import annotations

import math

from models.export import Margins, PageGeometry

CSS_PX_PER_INCH = 96
MM_PER_INCH = 25.4

# US letter, landscape: the short side is the page height.
LETTER_LANDSCAPE_HEIGHT_MM = 215.9
DEFAULT_MARGINS_MM: Margins = (8.0, 8.0, 8.0, 8.0)


def mm_to_px(mm: float) -> float:
    return mm * CSS_PX_PER_INCH / MM_PER_INCH


def px_to_mm(px: float) -> float:
    return px * MM_PER_INCH / CSS_PX_PER_INCH


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def printable_height_px(
    page_height_mm: float = LETTER_LANDSCAPE_HEIGHT_MM,
    margins: Margins = DEFAULT_MARGINS_MM,
) -> int:
    """Height budget in px left on the page once top and bottom margins are taken."""
    top, _, bottom, _ = margins
    return max(1, _round_half_up(mm_to_px(page_height_mm - top - bottom)))


def page_geometry(
    width_px: float,
    height_px: float,
    margins: Margins = DEFAULT_MARGINS_MM,
) -> PageGeometry:
    """Size a page to hold content of the given px size plus *margins*.

    Content sizes are rounded up to whole px (minimum 1).  The page is
    landscape when it is at least as wide as it is tall.
    """
    top, right, bottom, left = margins
    width = max(1, math.ceil(width_px))
    height = max(1, math.ceil(height_px))
    width_mm = px_to_mm(width) + left + right
    height_mm = px_to_mm(height) + top + bottom
    return PageGeometry(
        width_px=width,
        height_px=height,
        width_mm=width_mm,
        height_mm=height_mm,
        orientation="landscape" if width_mm >= height_mm else "portrait",
    )

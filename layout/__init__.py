"""Scale-to-fit search and page geometry."""

from layout.fitting import MIN_SCALE, SEARCH_ITERATIONS, fit, fit_async
from layout.geometry import mm_to_px, page_geometry, printable_height_px, px_to_mm

__all__ = [
    "MIN_SCALE",
    "SEARCH_ITERATIONS",
    "fit",
    "fit_async",
    "mm_to_px",
    "page_geometry",
    "printable_height_px",
    "px_to_mm",
]

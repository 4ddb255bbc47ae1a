"""Scale-to-fit search for a content block under a page height budget.

Content height as a function of scale has no closed form once text wraps
and reflows, so the scale is found by measuring: one measurement at 1.0,
then a bounded binary search over ``[min_scale, 1.0]``, then one final
measurement at the best scale found.

The measurement itself is injected.  ``measure(scale)`` must apply *scale*
to the content, lay it out and return its height in px; within one call it
must be deterministic and must not grow as the scale shrinks.  ``fit``
takes a plain callable, ``fit_async`` awaits an async one.  Measurements
are always issued one at a time, in order, because they resize the same
content block.  Exceptions raised by ``measure`` propagate unchanged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sized
from typing import Any, Awaitable, Callable, Generator

from models.layout import ScaleResult

logger = logging.getLogger("presenter.layout")

# Below this scale proposal text is no longer legible.
MIN_SCALE = 0.58
# 12 halvings of a 0.42-wide interval resolve the scale to ~1e-4.
SEARCH_ITERATIONS = 12

Measure = Callable[[float], float]
AsyncMeasure = Callable[[float], Awaitable[float]]

_Search = Generator[float, float, ScaleResult]


def fit(
    content: Any,
    measure: Measure,
    target_height_px: float,
    *,
    min_scale: float = MIN_SCALE,
    iterations: int = SEARCH_ITERATIONS,
) -> ScaleResult:
    """Find the largest scale at which *content* is at most *target_height_px* tall.

    Args:
        content: The scalable blocks (e.g. plan cards).  When it is empty
            there is nothing to shrink and the height at 1.0 is returned.
        measure: ``measure(scale) -> height_px``.
        target_height_px: Page height budget.
        min_scale: Floor of the search.
        iterations: Number of binary-search steps.

    Returns:
        A ``ScaleResult``.  If the content does not fit even at *min_scale*
        the floor scale is returned with its (overflowing) height.

    Raises:
        ValueError: On a non-positive target or an out-of-range *min_scale*
            or *iterations*, and when *measure* returns NaN or infinity.
    """
    search = _search(content, target_height_px, min_scale, iterations)
    scale = next(search)
    while True:
        height = measure(scale)
        try:
            scale = search.send(height)
        except StopIteration as done:
            return done.value


async def fit_async(
    content: Any,
    measure: AsyncMeasure,
    target_height_px: float,
    *,
    min_scale: float = MIN_SCALE,
    iterations: int = SEARCH_ITERATIONS,
) -> ScaleResult:
    """Same as ``fit()`` for a measurement that has to await a layout pass."""
    search = _search(content, target_height_px, min_scale, iterations)
    scale = next(search)
    while True:
        height = await measure(scale)
        try:
            scale = search.send(height)
        except StopIteration as done:
            return done.value


def _check_arguments(target_height_px: float, min_scale: float, iterations: int) -> None:
    if target_height_px <= 0:
        raise ValueError(f"target_height_px must be positive, got {target_height_px}")
    if not 0.0 < min_scale <= 1.0:
        raise ValueError(f"min_scale must be in (0, 1], got {min_scale}")
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")


def _has_content(content: Any) -> bool:
    if content is None:
        return False
    if isinstance(content, Sized):
        return len(content) > 0
    return True


def _height(value: float) -> float:
    """Measured heights are floored at 1 px; NaN and infinities are rejected."""
    height = float(value)
    if not math.isfinite(height):
        raise ValueError(f"measure returned a non-finite height: {value!r}")
    return max(1.0, height)


def _search(
    content: Any,
    target_height_px: float,
    min_scale: float,
    iterations: int,
) -> _Search:
    """Yield the scales to measure, receive their heights, return the result."""
    _check_arguments(target_height_px, min_scale, iterations)

    height = _height((yield 1.0))
    if not _has_content(content) or height <= target_height_px:
        logger.info("content fits unscaled", extra={"scale": 1.0, "height_px": height})
        return ScaleResult(scale=1.0, height_px=height)

    low, high = min_scale, 1.0
    best = min_scale
    for step in range(1, iterations + 1):
        mid = (low + high) / 2
        height = _height((yield mid))
        logger.debug(
            "fit step", extra={"attempt": step, "scale": mid, "height_px": height}
        )
        if height <= target_height_px:
            best = mid
            low = mid
        else:
            high = mid

    height = _height((yield best))
    if height > target_height_px:
        logger.info(
            "content overflows at best scale",
            extra={"scale": best, "height_px": height},
        )
    else:
        logger.info("content scaled to fit", extra={"scale": best, "height_px": height})
    return ScaleResult(scale=best, height_px=height)

"""Capture-scale selection and the fallback ladder around the rasterizer.

Rasterizing a large page at a high capture scale can exhaust memory on
small devices.  The first scale is bounded by a pixel budget derived from
the device memory; if the rasterizer still fails, the capture is retried
at progressively lower scales (tenacity, no wait between attempts) and the
last error is re-raised once the ladder is exhausted.
"""

from __future__ import annotations

import logging
import math
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
)

from models.export import CaptureOptions, ExportPlan

logger = logging.getLogger("presenter.export")

T = TypeVar("T")

DEFAULT_CAPTURE_SCALE = 2.0
DEFAULT_DEVICE_MEMORY_GB = 4.0
MIN_RETRY_SCALE = 0.8
RETRY_FACTORS = (0.85, 0.7)


def pixel_budget(device_memory_gb: Optional[float] = None) -> int:
    """Maximum rendered pixel count for a device with the given memory."""
    memory = device_memory_gb or DEFAULT_DEVICE_MEMORY_GB
    if memory <= 2:
        return 2_500_000
    if memory <= 4:
        return 4_000_000
    return 6_000_000


def capture_scale(
    width_px: float,
    height_px: float,
    *,
    requested: float = DEFAULT_CAPTURE_SCALE,
    device_memory_gb: Optional[float] = None,
) -> float:
    """Largest capture scale (at least 1) that keeps the page within the pixel budget."""
    area = max(1.0, width_px * height_px)
    budget_scale = math.sqrt(pixel_budget(device_memory_gb) / area)
    return max(1.0, min(requested, budget_scale))


def capture_scale_ladder(
    scale: float, *, min_retry_scale: float = MIN_RETRY_SCALE
) -> list[float]:
    """Scales to try in order: *scale*, then reduced retries, without repeats."""
    ladder = [scale]
    for factor in RETRY_FACTORS:
        retry_scale = max(min_retry_scale, scale * factor)
        if retry_scale not in ladder:
            ladder.append(retry_scale)
    return ladder


def jpeg_quality(scale: float) -> float:
    """Lower JPEG quality slightly when capturing below 1x."""
    return 0.9 if scale < 1 else 0.95


def options_for(plan: ExportPlan, scale: float) -> CaptureOptions:
    return CaptureOptions(
        filename=plan.filename,
        scale=scale,
        jpeg_quality=jpeg_quality(scale),
        margins_mm=plan.margins_mm,
        page=plan.page,
    )


def _log_failed_attempt(plan: ExportPlan) -> Callable[[RetryCallState], None]:
    def log(retry_state: RetryCallState) -> None:
        scale = plan.capture_scales[retry_state.attempt_number - 1]
        logger.warning(
            "capture attempt failed: %s",
            retry_state.outcome.exception(),
            extra={"attempt": retry_state.attempt_number, "scale": scale},
        )

    return log


def _retry_kwargs(plan: ExportPlan) -> dict:
    return {
        "stop": stop_after_attempt(len(plan.capture_scales)),
        "retry": retry_if_exception_type(Exception),
        "after": _log_failed_attempt(plan),
        "reraise": True,
    }


def capture_with_fallback(
    render: Callable[[CaptureOptions], T], plan: ExportPlan
) -> T:
    """Call *render* with each step of the plan's ladder until one succeeds.

    Raises:
        Exception: Whatever *render* raised on the last attempt.
    """
    scales = iter(plan.capture_scales)
    retrying = Retrying(**_retry_kwargs(plan))
    return retrying(lambda: render(options_for(plan, next(scales))))


async def capture_with_fallback_async(
    render: Callable[[CaptureOptions], Awaitable[T]], plan: ExportPlan
) -> T:
    """Async counterpart of ``capture_with_fallback()``; attempts never overlap."""
    scales = iter(plan.capture_scales)

    async def attempt() -> T:
        return await render(options_for(plan, next(scales)))

    return await AsyncRetrying(**_retry_kwargs(plan))(attempt)

"""FastAPI application for the proposal presenter.

Exports ``app`` for use with ``uvicorn main:app``.
"""

import json
import logging
import traceback
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# Load .env next to this file so PRESENTER_* settings are set
load_dotenv(Path(__file__).resolve().parent / ".env")

from export.plan import plan_export
from export.settings import ExportSettings
from markup.pipeline import sanitize_and_normalize
from models.export import ExportPlan
from models.request import ExportPlanRequest, RenderRequest
from models.response import RenderResponse


# ---------------------------------------------------------------------------
# Structured JSON logging
# ---------------------------------------------------------------------------

class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter for structured log output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Include optional extra fields when present
        for key in ("scale", "height_px", "attempt", "chars_in", "chars_out"):
            val = getattr(record, key, None)
            if val is not None:
                log_data[key] = val
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


_handler = logging.StreamHandler()
_handler.setFormatter(StructuredFormatter())

logger = logging.getLogger("presenter")
logger.addHandler(_handler)
logger.setLevel(logging.INFO)
# Prevent propagation to root logger to avoid duplicate output
logger.propagate = False


# ---------------------------------------------------------------------------
# Settings (lazy, read once)
# ---------------------------------------------------------------------------

_settings: ExportSettings | None = None


def _get_settings() -> ExportSettings:
    """Return the module-level export settings, loading them on first use."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = ExportSettings.from_env()
    return _settings


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(title="Proposal Presenter")


@app.exception_handler(Exception)
async def catch_all_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a generic JSON 500."""
    logger.error(
        "Unhandled exception: %s: %s\n%s",
        type(exc).__name__,
        exc,
        traceback.format_exc(),
    )
    return JSONResponse(status_code=500, content={"error": "internal_error"})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """Health check."""
    return {"status": "healthy"}


@app.post("/render", response_model=RenderResponse)
async def render(request: RenderRequest) -> RenderResponse:
    """Sanitize and normalize stored rich text for the presenter page."""
    html = sanitize_and_normalize(request.html)
    logger.info(
        "render",
        extra={"chars_in": len(request.html), "chars_out": len(html)},
    )
    return RenderResponse(html=html)


@app.post("/export/plan", response_model=ExportPlan)
async def export_plan(request: ExportPlanRequest) -> ExportPlan:
    """Plan a single-page PDF export for an already fitted print node."""
    plan = plan_export(
        request.width_px,
        request.height_px,
        firm_name=request.firm_name,
        device_memory_gb=request.device_memory_gb,
        today=request.today,
        settings=_get_settings(),
    )
    logger.info(
        "export plan",
        extra={"scale": plan.capture_scales[0], "height_px": plan.page.height_px},
    )
    return plan

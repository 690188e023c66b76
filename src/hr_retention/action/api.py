"""FastAPI application exposing the retention analysis."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hr_retention.db.connection import engine
from hr_retention.db.models import Base

logger = logging.getLogger(__name__)

app = FastAPI(title="HR Retention Analytics API", version="1.0.0")

# ---------------------------------------------------------------------------
# Include modular routers
# ---------------------------------------------------------------------------
from hr_retention.action.routers.analysis import router as analysis_router  # noqa: E402
from hr_retention.action.routers.employees import router as employees_router  # noqa: E402
from hr_retention.action.routers.reports import router as reports_router  # noqa: E402

app.include_router(analysis_router)
app.include_router(reports_router)
app.include_router(employees_router)


@app.on_event("startup")
async def _ensure_tables():
    """Create the star-schema tables if they are missing."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    except Exception:
        logger.exception("Failed to ensure database schema")


@app.exception_handler(Exception)
async def _global_error_handler(request: Request, exc: Exception):
    """Catch-all: ensure every unhandled error returns JSON, not raw HTML."""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={
            "detail": f"Server error: {exc}",
            "error": str(exc),
            "status": "failed",
        },
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}

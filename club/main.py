# club/main.py
"""
FastAPI application entry point.
Includes request timing, the global error handler, and all routers.
"""

import time

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from club.config import settings
from club.routers import health, runs
from club.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="Computer Club Log API",
    description="Replays a day of computer club events and reports per-table revenue.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(runs.router,   prefix="/api/v1", tags=["Runs"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

logger.info(f"Club API ready (time format {settings.TIME_FORMAT!r}, queue size {settings.EVENTS_QUEUE_SIZE})")

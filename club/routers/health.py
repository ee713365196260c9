# club/routers/health.py
"""System health check endpoint."""

from datetime import datetime

from fastapi import APIRouter

from club.config import settings

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "time_format": settings.TIME_FORMAT,
        "events_queue_size": settings.EVENTS_QUEUE_SIZE,
    }

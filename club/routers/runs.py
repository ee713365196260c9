# club/routers/runs.py
"""
Log replay endpoint.
POST /runs — body is the raw log text; returns the rendered lines and revenue.
"""

from fastapi import APIRouter, HTTPException, Request

from club.config import settings
from club.exceptions import LogError
from club.schemas.run import RunOut, TableRevenueOut
from club.services.club_runner import replay
from club.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/runs", response_model=RunOut, summary="Replay a club log")
async def create_run(request: Request):
    """
    Processes the whole log in one request. A malformed row aborts the run
    with HTTP 422 and only the parse error message, no partial output.
    """
    raw_body = await request.body()
    if not raw_body:
        raise HTTPException(status_code=400, detail="empty body")

    text = raw_body.decode("utf-8", errors="replace")
    logger.info(f"Run request | {len(raw_body)} bytes")

    try:
        result = await replay(text.splitlines(), settings)
    except LogError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return RunOut(
        lines=result.lines,
        revenue=[
            TableRevenueOut(table=table, income=stats.income, usage=stats.usage_text)
            for table, stats in result.report
        ],
    )

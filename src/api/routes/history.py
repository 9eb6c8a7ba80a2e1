"""Prediction history endpoints: hourly timeline and monthly heatmap."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from ...config.logging import get_logger
from ...services.dashboard_service import DashboardService
from ...services.history_aggregator import build_monthly_heatmap, build_timeline
from ...models.history import OutcomeFilter, TimelineWindow
from ...utils.timestamps import utc_now
from ...utils.tracing import get_or_create_trace_id
from ..dependencies import get_dashboard_service

logger = get_logger(__name__)
router = APIRouter()


@router.get("/history/timeline")
async def get_timeline(
    window: TimelineWindow = Query(TimelineWindow.DAY, description="Lookback window"),
    outcome: OutcomeFilter = Query(OutcomeFilter.ALL, description="Outcome filter"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Recent predictions grouped by hour."""
    trace_id = get_or_create_trace_id()
    logger.info("history_timeline_request", window=window.value, outcome=outcome.value, trace_id=trace_id)

    predictions = await service.load_history()
    groups = build_timeline(predictions, utc_now(), window, outcome, service.default_tz)

    return JSONResponse(
        status_code=200,
        content={
            "window": window.value,
            "outcome": outcome.value,
            "groups": [
                {
                    **group.model_dump(mode="json", exclude={"predictions"}),
                    "predictions": [p.to_document() for p in group.predictions],
                }
                for group in groups
            ],
            "count": len(groups),
        },
    )


@router.get("/history/heatmap")
async def get_heatmap(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Calendar year (default: current)"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month (default: current)"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Daily win rate and confidence for one month."""
    trace_id = get_or_create_trace_id()
    now = utc_now().astimezone(service.default_tz)
    if (year is None) != (month is None):
        raise HTTPException(status_code=422, detail="year and month must be given together")
    year = year or now.year
    month = month or now.month
    logger.info("history_heatmap_request", year=year, month=month, trace_id=trace_id)

    predictions = await service.load_history()
    heatmap = build_monthly_heatmap(predictions, year, month, service.default_tz)
    return JSONResponse(status_code=200, content=heatmap.model_dump(mode="json"))

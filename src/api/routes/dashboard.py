"""Cached dashboard snapshot, view model and manual refresh."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...config.logging import get_logger
from ...services.dashboard_view import build_dashboard_view
from ...tasks.dashboard_refresh_task import DashboardRefreshTask
from ...utils.timestamps import isoformat_utc, utc_now
from ...utils.tracing import get_or_create_trace_id
from ..dependencies import get_refresh_task
from .predictions import NO_CACHE_HEADERS

logger = get_logger(__name__)
router = APIRouter()


def _snapshot_payload(task: DashboardRefreshTask) -> dict:
    snapshot = task.snapshot
    view = build_dashboard_view(snapshot, task.service.resolver, utc_now())
    return {
        "data": snapshot.to_response() if snapshot else None,
        "view": view.model_dump(mode="json"),
        "refresh": {
            "interval_seconds": task.interval_seconds,
            "running": task.is_running,
            "last_success_at": isoformat_utc(task.last_success_at) if task.last_success_at else None,
            "last_error": task.last_error,
            "last_error_at": isoformat_utc(task.last_error_at) if task.last_error_at else None,
        },
    }


@router.get("/dashboard")
async def get_dashboard(task: DashboardRefreshTask = Depends(get_refresh_task)):
    """Latest snapshot from the refresh task, with its view model."""
    trace_id = get_or_create_trace_id()
    logger.info("dashboard_snapshot_request", has_snapshot=task.snapshot is not None, trace_id=trace_id)
    return JSONResponse(status_code=200, headers=NO_CACHE_HEADERS, content=_snapshot_payload(task))


@router.post("/dashboard/refresh")
async def refresh_dashboard(task: DashboardRefreshTask = Depends(get_refresh_task)):
    """Rebuild the snapshot now. A failed rebuild keeps the previous snapshot."""
    trace_id = get_or_create_trace_id()
    refreshed = await task.refresh()
    logger.info("dashboard_manual_refresh", refreshed=refreshed, trace_id=trace_id)

    payload = _snapshot_payload(task)
    payload["refreshed"] = refreshed
    return JSONResponse(status_code=200 if refreshed else 503, headers=NO_CACHE_HEADERS, content=payload)

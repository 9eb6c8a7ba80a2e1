"""Dashboard data endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...config.logging import get_logger
from ...exceptions import DashboardError, PriceFeedError, StoreError
from ...services.dashboard_service import DashboardService
from ...utils.tracing import get_or_create_trace_id
from ..dependencies import get_dashboard_service

logger = get_logger(__name__)
router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/predictions")
async def get_predictions(service: DashboardService = Depends(get_dashboard_service)):
    """Build and return a fresh dashboard document."""
    trace_id = get_or_create_trace_id()
    logger.info("predictions_request", trace_id=trace_id)

    try:
        dashboard = await service.build_dashboard()
    except DashboardError as e:
        logger.error("predictions_request_failed", error_type=type(e).__name__, error=e.message, trace_id=trace_id)
        # Only upstream outages are reported as unavailable
        return JSONResponse(
            status_code=503 if isinstance(e, (StoreError, PriceFeedError)) else 500,
            headers=NO_CACHE_HEADERS,
            content={"error": "Failed to fetch data", "message": e.message, "type": type(e).__name__},
        )
    except Exception as e:
        logger.error("predictions_request_failed", error=str(e), trace_id=trace_id, exc_info=True)
        return JSONResponse(
            status_code=500,
            headers=NO_CACHE_HEADERS,
            content={"error": "Failed to fetch data", "message": str(e), "type": type(e).__name__},
        )

    logger.info(
        "predictions_request_completed",
        recent_count=len(dashboard.recent_predictions),
        pending_count=len(dashboard.pending_predictions),
        trace_id=trace_id,
    )
    return JSONResponse(status_code=200, headers=NO_CACHE_HEADERS, content=dashboard.to_response())

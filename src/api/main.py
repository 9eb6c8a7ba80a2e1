"""FastAPI application setup and configuration."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .middleware.auth import APIKeyAuthMiddleware
from .middleware.tracing import TraceIDMiddleware
from ..config.settings import Settings, settings as default_settings
from ..config.logging import configure_logging, get_logger
from ..database.document_store import DocumentStore
from ..exceptions import DashboardError, PriceFeedError, StoreError
from ..services.dashboard_service import DashboardService
from ..services.price_feed_client import PriceFeedClient
from ..tasks.dashboard_refresh_task import DashboardRefreshTask
from .routes import dashboard, history, predictions

configure_logging()
logger = get_logger(__name__)


def create_app(
    settings: Settings = default_settings,
    store: Optional[DocumentStore] = None,
    price_feed: Optional[PriceFeedClient] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    The document store and price feed clients are created in the lifespan
    unless passed in, and shared by every request and the refresh task.

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("dashboard_api_starting", service=settings.dashboard_api_service_name)
        settings.validate_on_startup()
        app_store = store or DocumentStore(
            settings.database_url_async,
            table=settings.document_store_table,
            min_size=settings.document_store_pool_min_size,
            max_size=settings.document_store_pool_max_size,
        )
        app_price_feed = price_feed or PriceFeedClient(
            settings.price_feed_url,
            symbol=settings.price_feed_symbol,
            currency=settings.price_feed_currency,
            timeout=settings.price_feed_timeout_seconds,
        )
        try:
            await app_store.connect()
        except Exception as e:
            logger.error("dashboard_api_startup_failed", error=str(e))
            await app_price_feed.close()
            raise

        service = DashboardService.from_settings(app_store, app_price_feed, settings)
        refresh_task = DashboardRefreshTask(service, settings.dashboard_refresh_interval_seconds)
        app.state.store = app_store
        app.state.dashboard_service = service
        app.state.refresh_task = refresh_task

        if settings.dashboard_refresh_enabled:
            await refresh_task.start()
        logger.info("dashboard_api_started")

        yield

        logger.info("dashboard_api_shutting_down")
        await refresh_task.stop()
        await app_price_feed.close()
        await app_store.close()
        logger.info("dashboard_api_shutdown_complete")

    app = FastAPI(
        title="Prediction Dashboard API",
        description="Read-only statistics for the BTC price prediction pipeline",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Must be False when allow_origins=["*"]
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Trace-ID"],
    )
    app.add_middleware(APIKeyAuthMiddleware, api_key=settings.dashboard_api_key, api_prefix="/api")
    # Added last so it runs first and the trace ID covers authentication too
    app.add_middleware(TraceIDMiddleware)

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        """Handle DashboardError exceptions with consistent error response."""
        logger.error(
            "dashboard_api_error",
            error_type=type(exc).__name__,
            message=exc.message,
            trace_id=exc.trace_id,
        )

        status_code = 503 if isinstance(exc, (StoreError, PriceFeedError)) else 500
        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "type": type(exc).__name__,
                    "message": exc.message,
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error("unexpected_error", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "InternalServerError",
                    "message": "An unexpected error occurred",
                }
            },
        )

    app.include_router(predictions.router, prefix="/api/v1", tags=["predictions"])
    app.include_router(dashboard.router, prefix="/api/v1", tags=["dashboard"])
    app.include_router(history.router, prefix="/api/v1", tags=["history"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": settings.dashboard_api_service_name}

    @app.get("/live")
    async def live():
        """Liveness probe."""
        return {"status": "alive"}

    @app.get("/ready")
    async def ready(request: Request):
        """Readiness probe."""
        app_store: Optional[DocumentStore] = getattr(request.app.state, "store", None)
        if app_store is None or not app_store.is_connected:
            return JSONResponse(status_code=503, content={"status": "not ready", "reason": "store not connected"})
        try:
            await app_store.ping()
        except StoreError as e:
            logger.warning("readiness_check_failed", error=e.message)
            return JSONResponse(status_code=503, content={"status": "not ready", "reason": "store unreachable"})
        return {"status": "ready"}

    return app


# Create app instance
app = create_app()

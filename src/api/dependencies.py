"""FastAPI dependencies resolving the objects built in the application lifespan."""

from fastapi import Request

from ..services.dashboard_service import DashboardService
from ..tasks.dashboard_refresh_task import DashboardRefreshTask


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def get_refresh_task(request: Request) -> DashboardRefreshTask:
    return request.app.state.refresh_task

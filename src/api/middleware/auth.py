"""API key authentication middleware.

When `settings.dashboard_api_key` is configured, REST endpoints under `/api/`
require the key in the `X-API-Key` header or the `api_key` query parameter.
Without a configured key the dashboard is public, as the prediction
dashboard front end expects.

On authentication failure, a JSON 401 response is returned.
"""

from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ...config.logging import get_logger
from ...utils.tracing import get_or_create_trace_id

logger = get_logger(__name__)


class APIKeyAuthMiddleware(BaseHTTPMiddleware):
    """Middleware enforcing simple API key authentication for REST endpoints."""

    def __init__(self, app, api_key: Optional[str], api_prefix: str = "/api"):
        super().__init__(app)
        self.api_key = api_key
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and validate API key for protected routes."""
        path = request.url.path
        if not self.api_key or not path.startswith(self.api_prefix):
            return await call_next(request)

        provided = request.headers.get("X-API-Key") or request.query_params.get("api_key")

        if provided == self.api_key:
            return await call_next(request)

        reason = "missing_api_key" if not provided else "invalid_api_key"
        logger.warning(
            "api_authentication_failed",
            reason=reason,
            path=path,
            method=request.method,
            trace_id=get_or_create_trace_id(),
        )
        return JSONResponse(
            status_code=401,
            content={
                "error": "Missing API key" if not provided else "Invalid API key",
                "code": "AUTHENTICATION_FAILED",
                "details": {"reason": reason},
            },
        )

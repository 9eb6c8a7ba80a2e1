"""Trace ID middleware.

Takes the trace ID from the `X-Trace-ID` request header (or generates one),
binds it to the logging context, logs the request/response pair and echoes
the ID back on the response.
"""

import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...config.logging import get_logger, bind_context
from ...utils.tracing import generate_trace_id, set_trace_id, clear_trace_id

logger = get_logger(__name__)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Middleware for trace ID propagation and request logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with trace ID."""
        trace_id = request.headers.get("X-Trace-ID") or generate_trace_id()
        set_trace_id(trace_id)
        bind_context(path=request.url.path, method=request.method)

        # Probes are too noisy to log
        quiet = request.url.path in ("/health", "/live", "/ready")
        start_time = time.time()
        if not quiet:
            logger.info("api_request_received", query_params=str(request.query_params) or None)

        try:
            response = await call_next(request)
        finally:
            process_time = time.time() - start_time
            clear_trace_id()

        if not quiet:
            logger.info(
                "api_request_completed",
                trace_id=trace_id,
                path=request.url.path,
                status_code=response.status_code,
                process_time_seconds=round(process_time, 4),
            )

        response.headers["X-Trace-ID"] = trace_id
        return response

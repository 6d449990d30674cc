"""
FastAPI middleware for request context and logging
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import LoggingConfig
from app.core.tracing import get_current_trace_id

logger = LoggingConfig.get_logger(__name__)


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id and trace id to every log line of a request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        trace_id = get_current_trace_id() or request.headers.get("x-trace-id")
        if trace_id:
            LoggingConfig.set_context(trace_id=trace_id)

        start_time = time.time()
        logger.debug("Request started", extra={"query_params": str(request.query_params)})

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.time() - start_time) * 1000),
                }
            )
            raise
        else:
            logger.info(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": int((time.time() - start_time) * 1000),
                }
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            LoggingConfig.clear_context()

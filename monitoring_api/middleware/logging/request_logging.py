"""
HTTP request logging middleware.

Assigns a request ID and a correlation ID (honouring ``X-Correlation-ID``),
logs the start and completion of each request with its duration, and echoes
both IDs back in response headers.
"""

import time
import uuid
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging

logger = setup_api_logging(
    "monitoring_api.request_logging", log_level=get_settings().LOG_LEVEL
)

SLOW_REQUEST_MS = 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP request/response lifecycle logging"""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid.uuid4())
        correlation_id = request.headers.get("X-Correlation-ID") or request_id

        start_time = time.time()

        logger.info(
            "HTTP request started",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None,
                "event_type": "http_request_start",
            },
        )

        request.state.request_id = request_id
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"HTTP request failed: {str(e)}",
                extra={
                    "request_id": request_id,
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error_type": type(e).__name__,
                    "event_type": "http_request_error",
                },
                exc_info=True,
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)

        # Log level follows the outcome
        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400 or duration_ms > SLOW_REQUEST_MS:
            log = logger.warning
        else:
            log = logger.info

        log(
            "HTTP request completed",
            extra={
                "request_id": request_id,
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "event_type": "http_request_complete",
                "success": response.status_code < 400,
                "slow_request": duration_ms > SLOW_REQUEST_MS,
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id

        return response


def setup_request_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("Request logging middleware configured")

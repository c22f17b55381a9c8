"""
Error handling for the Monitoring Lab API.
Provides centralized exception handling and standardized error responses.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging

logger = setup_api_logging("monitoring_api.error_handler", log_level=get_settings().LOG_LEVEL)


class ApiErrorHandler:
    """
    Centralized error handling for the Monitoring Lab API.

    Failures the request handler does not deal with itself end up here and
    are rendered in one envelope format, tagged with the correlation ID.
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        """
        Setup all error handlers for the FastAPI application.
        """

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            """Handle HTTP exceptions from Starlette/FastAPI."""
            return ApiErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(exc.detail),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Handle request validation errors."""
            error_details: list[Dict[str, Any]] = []
            for error in exc.errors():
                error_details.append(
                    {
                        "field": ".".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                )

            return ApiErrorHandler._create_error_response(
                request=request,
                status_code=422,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": error_details},
            )

        @app.exception_handler(asyncio.TimeoutError)
        async def timeout_error_handler(
            request: Request, exc: asyncio.TimeoutError
        ) -> JSONResponse:
            """Handle store calls that exceeded their time bound."""
            logger.error(
                "Store call timed out",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "store_timeout",
                },
            )
            return ApiErrorHandler._create_error_response(
                request=request,
                status_code=504,
                error_type="timeout_error",
                message="The product store did not respond in time",
            )

        @app.exception_handler(SQLAlchemyError)
        async def store_error_handler(
            request: Request, exc: SQLAlchemyError
        ) -> JSONResponse:
            """Handle product store failures."""
            logger.error(
                "Product store failure",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "event_type": "store_error",
                },
                exc_info=True,
            )
            return ApiErrorHandler._create_error_response(
                request=request,
                status_code=503,
                error_type="store_error",
                message="The product store is unavailable",
                details={"exception_type": type(exc).__name__},
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            """Handle anything else as an internal error."""
            logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "event_type": "unhandled_exception",
                },
                exc_info=True,
            )

            return ApiErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
                details={"exception_type": type(exc).__name__},
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        """
        Create a standardized error response.

        Args:
            request: The FastAPI request object
            status_code: HTTP status code
            error_type: Type of error for categorization
            message: Human-readable error message
            details: Additional error details

        Returns:
            JSONResponse with standardized error format
        """
        correlation_id = getattr(request.state, "correlation_id", None)

        error_response: Dict[str, Any] = {
            "error": {
                "type": error_type,
                "message": message,
                "status_code": status_code,
                "correlation_id": correlation_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
            }
        }

        if details:
            error_response["error"]["details"] = details

        # 5xx errors are logged by their handlers
        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(status_code=status_code, content=error_response)


def setup_error_handling(app: FastAPI) -> None:
    """
    Convenience function to setup error handling.

    Args:
        app: FastAPI application instance
    """
    ApiErrorHandler.setup_error_handlers(app)

    logger.info(
        "Error handling configured",
        extra={"event_type": "error_handler_setup"},
    )

from .request_logging import RequestLoggingMiddleware, setup_request_logging_middleware

__all__ = ["RequestLoggingMiddleware", "setup_request_logging_middleware"]

from .error_handler import ApiErrorHandler, setup_error_handling

__all__ = ["ApiErrorHandler", "setup_error_handling"]

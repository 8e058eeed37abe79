"""
Error handling utilities.
"""
from typing import Callable, Optional
from .logging_config import get_logger
from .exceptions import FakeHashError


logger = get_logger(__name__)


class ErrorContext:
    """
    Context manager that logs failures of a named operation.

    FakeHash errors are logged with their structured details; anything else
    is logged with a traceback. Cleanup runs on failure, and the exception
    propagates unless ``raise_on_error`` is False.
    """

    def __init__(
        self,
        operation_name: str,
        cleanup_func: Optional[Callable] = None,
        raise_on_error: bool = True
    ):
        self.operation_name = operation_name
        self.cleanup_func = cleanup_func
        self.raise_on_error = raise_on_error
        self.logger = logger

    def __enter__(self):
        self.logger.debug(f"Starting operation: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed operation: {self.operation_name}")
            return False

        if isinstance(exc_val, FakeHashError):
            self.logger.error(
                f"Error in operation {self.operation_name}: {exc_val.message}",
                extra={'extra_fields': {'error_details': exc_val.to_dict()}}
            )
        else:
            self.logger.error(
                f"Error in operation {self.operation_name}: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )

        if self.cleanup_func:
            try:
                self.cleanup_func()
            except Exception as cleanup_error:
                self.logger.error(
                    f"Error during cleanup: {cleanup_error}",
                    exc_info=True
                )

        return not self.raise_on_error

# app/utils/error_handling.py

from typing import Dict, Any, Optional

from fastapi import status

class APIError(Exception):
    """Base class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

class CalculationError(APIError):
    """
    Error for sizing failures.

    Raised by the sizing service and turned into the standard error envelope
    by `ErrorHandlingMiddleware`.
    """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="calculation_error",
            details=details
        )

# app/utils/response_formatter.py

from typing import Dict, Any, Optional


def error_response(
    message: str,
    error_code: str = "internal_error",
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        message: Error message
        error_code: Error code for the client
        details: Additional error details

    Returns:
        Standardized error response dictionary
    """
    return {
        "status": "error",
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {}
        }
    }

class ResponseFormatter:
    """
    Utility class for formatting API responses.
    """

    @staticmethod
    def error(
        message: str,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Create a standardized error response.
        """
        return error_response(message, error_code, details)

response_formatter = ResponseFormatter()

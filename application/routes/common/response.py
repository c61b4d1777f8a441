"""
Response utilities for standardized API responses.

Every endpoint answers with JSON; errors share one shape:
{"error": message, "error_code": code, "details": {...}}.
"""

from typing import Any, Dict, Optional, Tuple

from quart import Response, jsonify


class APIResponse:
    """
    Standardized API response helper.

    Ensures consistent response format across all endpoints.
    """

    @staticmethod
    def success(data: Any, status: int = 200) -> Tuple[Response, int]:
        """
        Create a successful response.

        Example:
            >>> return APIResponse.success({"allowed_directories": ["content"]})
        """
        return jsonify(data), status

    @staticmethod
    def created(data: Any) -> Tuple[Response, int]:
        """Create a 201 response, used when a commit was written."""
        return APIResponse.success(data, 201)

    @staticmethod
    def error(
        message: str,
        status: int = 400,
        details: Any = None,
        error_code: Optional[str] = None,
    ) -> Tuple[Response, int]:
        """
        Create an error response.

        Args:
            message: Error message
            status: HTTP status code (default: 400)
            details: Additional error details (optional)
            error_code: Error code for client-side handling (optional)

        Example:
            >>> return APIResponse.error("Validation failed", 400, details=errors)
            >>> return APIResponse.error("Branch moved", 409, error_code="CONFLICT")
        """
        error_data: Dict[str, Any] = {"error": message}
        if error_code is not None:
            error_data["error_code"] = error_code
        if details is not None:
            error_data["details"] = details
        return jsonify(error_data), status

    @staticmethod
    def not_found(resource: str = "Resource") -> Tuple[Response, int]:
        return APIResponse.error(f"{resource} not found", 404, error_code="NOT_FOUND")

    @staticmethod
    def unauthorized(message: str = "Unauthorized") -> Tuple[Response, int]:
        return APIResponse.error(message, 401, error_code="UNAUTHORIZED")

    @staticmethod
    def internal_error(message: str = "Internal server error") -> Tuple[Response, int]:
        return APIResponse.error(message, 500, error_code="INTERNAL_ERROR")

"""
Centralized error handling middleware.

Renders the application error taxonomy and framework errors in one
response format, logging each at a level matching its severity.
"""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError
from quart import Quart
from werkzeug.exceptions import HTTPException

from application.routes.common.response import APIResponse
from common.exception.errors import CMSError
from common.utils.jwt_utils import TokenExpiredError, TokenValidationError

logger = logging.getLogger(__name__)


def format_validation_errors(error: PydanticValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors to {field, message, type} records."""
    return [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def register_error_handlers(app: Quart) -> None:
    """
    Register centralized error handlers for the application.

    Handles:
    - CMSError subclasses → their own status and error code
    - ValidationError (Pydantic) → 400 Bad Request
    - TokenExpiredError / TokenValidationError → 401 Unauthorized
    - HTTPException (Werkzeug) → Appropriate status
    - Exception (Generic) → 500 Internal Server Error

    Example:
        >>> app = Quart(__name__)
        >>> register_error_handlers(app)
    """

    @app.errorhandler(CMSError)
    async def handle_cms_error(error: CMSError):
        """
        Handle application errors.

        Server-side failures are logged as errors, client-side ones as warnings.
        """
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        else:
            logger.warning(f"{type(error).__name__}: {error.message}")

        details = {"field": error.field} if error.field else None
        return APIResponse.error(
            error.message, error.status_code, details=details, error_code=error.error_code
        )

    @app.errorhandler(PydanticValidationError)
    async def handle_validation_error(error: PydanticValidationError):
        errors = format_validation_errors(error)
        logger.warning(f"Validation error: {errors}")
        return APIResponse.error(
            "Validation failed", 400, details={"errors": errors}, error_code="VALIDATION_ERROR"
        )

    @app.errorhandler(TokenExpiredError)
    async def handle_token_expired(error: TokenExpiredError):
        logger.warning(f"Token expired: {error}")
        return APIResponse.unauthorized("Token has expired")

    @app.errorhandler(TokenValidationError)
    async def handle_token_invalid(error: TokenValidationError):
        logger.warning(f"Invalid token: {error}")
        return APIResponse.unauthorized("Invalid or malformed token")

    @app.errorhandler(HTTPException)
    async def handle_http_exception(error: HTTPException):
        """
        Handle Werkzeug HTTP exceptions.

        Preserves the original HTTP status code.
        """
        logger.info(f"HTTP exception: {error.code} - {error.description}")
        if error.code == 404:
            return APIResponse.not_found("Endpoint")
        if error.code == 405:
            return APIResponse.error("Method not allowed", 405)
        return APIResponse.error(error.name, error.code, details={"message": error.description})

    @app.errorhandler(Exception)
    async def handle_generic_exception(error: Exception):
        """
        Handle all uncaught exceptions.

        Logs the full stack trace and hides implementation details.
        """
        logger.exception(f"Unhandled exception: {error}")
        return APIResponse.internal_error("An unexpected error occurred")

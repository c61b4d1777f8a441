"""
Authentication middleware for Quart routes.

Provides decorators for protecting routes with JWT authentication.
"""

import functools
import logging
from typing import Any, Callable

from quart import jsonify, request

from common.config.config import ACCESS_TOKEN_COOKIE
from common.utils.jwt_utils import (
    TokenExpiredError,
    TokenValidationError,
    extract_bearer_token,
    get_user_id_from_token,
)

logger = logging.getLogger(__name__)


def _get_request_token() -> str:
    """Return the session token from the Authorization header or the access cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header:
        return extract_bearer_token(auth_header)
    return request.cookies.get(ACCESS_TOKEN_COOKIE, "")


def require_auth(func: Callable) -> Callable:
    """
    Decorator to require authentication for a route.

    Accepts the session token either as "Authorization: Bearer <token>" or as
    the access token cookie set by the auth subsystem, and attaches
    request.user_id for the handler.

    Returns 401 Unauthorized when no token is present or it does not verify.

    Usage:
        @bp.route('/protected')
        @require_auth
        async def protected_route():
            user_id = request.user_id
            return {'message': f'Hello {user_id}'}
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            token = _get_request_token()
            if not token:
                logger.warning("Missing session token")
                return jsonify({"error": "Unauthorized - missing token"}), 401

            request.user_id = get_user_id_from_token(token)
            logger.debug(f"Authenticated user: {request.user_id}")

        except TokenExpiredError:
            logger.warning("Token expired")
            return jsonify({"error": "Unauthorized - token expired"}), 401

        except TokenValidationError as e:
            logger.warning(f"Invalid token: {e}")
            return jsonify({"error": "Unauthorized - invalid token"}), 401

        return await func(*args, **kwargs)

    return wrapper

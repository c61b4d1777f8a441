"""
Rate limiting utilities for route handlers.

Provides standardized rate limit key functions.
"""

from quart import request


async def default_rate_limit_key() -> str:
    """
    Generate rate limit key based on client IP address.

    Used for unauthenticated endpoints such as the health check.

    Returns:
        str: Client IP address or "unknown" if not available
    """
    return request.remote_addr or "unknown"


async def user_rate_limit_key() -> str:
    """
    Generate rate limit key based on authenticated user ID.

    require_auth must run before the limiter so request.user_id is set;
    otherwise the client IP address is used.

    Example:
        >>> @require_auth
        >>> @rate_limit(30, timedelta(minutes=1), key_function=user_rate_limit_key)
        >>> async def bulk_update(project_id, owner, repo):
        >>>     pass
    """
    user_id = getattr(request, "user_id", None)
    return f"user:{user_id}" if user_id else request.remote_addr or "anonymous"

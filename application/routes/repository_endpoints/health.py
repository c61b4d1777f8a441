"""Health check endpoint."""

from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse


async def handle_health_check() -> ResponseReturnValue:
    """Liveness probe; does not call GitHub."""
    return APIResponse.success({"status": "healthy", "service": "repository"})

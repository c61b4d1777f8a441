"""
Organization routes for the GitHub App installation.
"""

from datetime import timedelta

from quart import Blueprint
from quart.typing import ResponseReturnValue
from quart_rate_limiter import rate_limit

from application.routes.common.constants import (
    RATE_LIMIT_REPOSITORY_ADMIN,
    RATE_LIMIT_REPOSITORY_READ,
)
from application.routes.common.rate_limiting import user_rate_limit_key
from application.routes.common.validation import validate_json
from application.routes.repository_endpoints import (
    handle_list_installation_repositories,
    handle_register_installation,
)
from application.routes.repository_endpoints.models import RegisterInstallationRequest
from common.middleware.auth_middleware import require_auth

org_bp = Blueprint("orgs", __name__, url_prefix="/api/v1/orgs")


@org_bp.route("/<org_id>/repos", methods=["GET"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_READ, timedelta(minutes=1), key_function=user_rate_limit_key)
async def list_repositories(org_id: str) -> ResponseReturnValue:
    """List repositories available to the organization's installation."""
    return await handle_list_installation_repositories(org_id)


@org_bp.route("/<org_id>/installation", methods=["POST"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_ADMIN, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_json(RegisterInstallationRequest)
async def register_installation(org_id: str) -> ResponseReturnValue:
    """Record the organization's GitHub App installation."""
    return await handle_register_installation(org_id)

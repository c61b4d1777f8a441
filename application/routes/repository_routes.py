"""
Repository routes for managing project content stored in GitHub.

Every content route is addressed by project and repository; handlers live in
repository_endpoints and errors are rendered by the central error handlers.
"""

import logging
from datetime import timedelta

from quart import Blueprint
from quart.typing import ResponseReturnValue
from quart_rate_limiter import rate_limit

from application.routes.common.constants import (
    RATE_LIMIT_REPOSITORY_ADMIN,
    RATE_LIMIT_REPOSITORY_READ,
    RATE_LIMIT_REPOSITORY_WRITE,
)
from application.routes.common.rate_limiting import default_rate_limit_key, user_rate_limit_key
from application.routes.common.validation import validate_json, validate_query_params
from application.routes.repository_endpoints import (
    handle_bulk_update,
    handle_create_file,
    handle_get_config,
    handle_get_file_content,
    handle_health_check,
    handle_list_contents,
    handle_update_config,
)
from application.routes.repository_endpoints.models import (
    BulkUpdateRequest,
    CreateFileRequest,
    PathQuery,
    UpdateConfigRequest,
)
from common.middleware.auth_middleware import require_auth

logger = logging.getLogger(__name__)

repository_bp = Blueprint("repository", __name__, url_prefix="/api/v1")

REPO_PREFIX = "/projects/<project_id>/repos/<owner>/<repo>"


@repository_bp.route(f"{REPO_PREFIX}/contents", methods=["GET"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_READ, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_query_params(PathQuery)
async def list_contents(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """List a directory of the project's repository."""
    return await handle_list_contents(project_id, owner, repo)


@repository_bp.route(f"{REPO_PREFIX}/file", methods=["GET"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_READ, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_query_params(PathQuery)
async def get_file(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """Get one file of the project's repository."""
    return await handle_get_file_content(project_id, owner, repo)


@repository_bp.route(f"{REPO_PREFIX}/bulk-update", methods=["POST"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_WRITE, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_json(BulkUpdateRequest)
async def bulk_update(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """Commit several files in one commit."""
    return await handle_bulk_update(project_id, owner, repo)


@repository_bp.route(f"{REPO_PREFIX}/create-file", methods=["POST"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_WRITE, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_json(CreateFileRequest)
async def create_file(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """Create a new file."""
    return await handle_create_file(project_id, owner, repo)


@repository_bp.route(f"{REPO_PREFIX}/config", methods=["GET"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_READ, timedelta(minutes=1), key_function=user_rate_limit_key)
async def get_config(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """Get the allowed directories."""
    return await handle_get_config(project_id, owner, repo)


@repository_bp.route(f"{REPO_PREFIX}/config", methods=["PUT"])
@require_auth
@rate_limit(RATE_LIMIT_REPOSITORY_ADMIN, timedelta(minutes=1), key_function=user_rate_limit_key)
@validate_json(UpdateConfigRequest)
async def update_config(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """Replace the allowed directories."""
    return await handle_update_config(project_id, owner, repo)


@repository_bp.route("/health", methods=["GET"])
@rate_limit(RATE_LIMIT_REPOSITORY_READ, timedelta(minutes=1), key_function=default_rate_limit_key)
async def health_check() -> ResponseReturnValue:
    """Health check endpoint for repository service."""
    return await handle_health_check()

"""Repository policy endpoints."""

import logging

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service
from application.routes.repository_endpoints.models import UpdateConfigRequest
from application.services.github.repository.policy import RepositoryPolicy

logger = logging.getLogger(__name__)


def _policy_response(policy: RepositoryPolicy) -> dict:
    return {"allowed_directories": list(policy.directories), "hash": policy.sha}


async def handle_get_config(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    Get the allowed directories, initializing the branch and policy file on first use.

    Returns:
        {"allowed_directories": [...], "hash": "<policy file sha>"}
    """
    policy = await get_repository_service().get_policy(
        project_id, owner, repo, user_id=current_user_id()
    )
    return APIResponse.success(_policy_response(policy))


async def handle_update_config(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    Replace the allowed directories (organization owner only).

    Request Body:
        {"allowed_directories": ["content/blog"], "expected_hash": "<sha from GET>"}
    """
    data: UpdateConfigRequest = request.validated_data
    policy = await get_repository_service().set_policy(
        project_id,
        owner,
        repo,
        data.allowed_directories,
        user_id=current_user_id(),
        expected_sha=data.expected_hash,
    )
    logger.info(f"Policy of {owner}/{repo} updated by {current_user_id()}")
    return APIResponse.success(_policy_response(policy))

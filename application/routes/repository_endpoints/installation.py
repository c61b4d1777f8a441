"""Organization installation endpoints."""

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service
from application.routes.repository_endpoints.models import RegisterInstallationRequest


async def handle_list_installation_repositories(org_id: str) -> ResponseReturnValue:
    """
    List repositories the organization's GitHub App installation can access.

    Returns:
        {"repositories": [{name, owner, full_name, url, default_branch, ...}]}
        sorted by most recently updated first
    """
    repositories = await get_repository_service().list_installation_repositories(
        org_id, user_id=current_user_id()
    )
    return APIResponse.success({"repositories": [info.to_dict() for info in repositories]})


async def handle_register_installation(org_id: str) -> ResponseReturnValue:
    """
    Record the GitHub App installation of an organization (owner only).

    Request Body:
        {"installation_id": "12345678"}
    """
    data: RegisterInstallationRequest = request.validated_data
    org = await get_repository_service().register_installation(
        org_id, str(data.installation_id), user_id=current_user_id()
    )
    return APIResponse.success({"org_id": org.id, "installation_id": org.installation_id})

"""List directory contents endpoint."""

import logging

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service

logger = logging.getLogger(__name__)


async def handle_list_contents(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    List one level of a directory on the dedicated branch.

    Query:
        path: Directory path inside an allowed directory

    Returns:
        {"path": "content/blog", "entries": [{name, path, type, size, sha}, ...]}
    """
    path = request.validated_params.path
    entries = await get_repository_service().list_directory(
        project_id, owner, repo, path, user_id=current_user_id()
    )
    return APIResponse.success({"path": path, "entries": [entry.to_dict() for entry in entries]})

"""Get file content endpoint."""

import logging

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service

logger = logging.getLogger(__name__)


async def handle_get_file_content(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    Get one file from the dedicated branch.

    Query:
        path: File path inside an allowed directory

    Returns:
        {
            "path": "content/blog/post.md",
            "content": "file content as string",
            "hash": "<blob sha>"
        }
    """
    path = request.validated_params.path
    file_content = await get_repository_service().read_file(
        project_id, owner, repo, path, user_id=current_user_id()
    )
    return APIResponse.success(file_content.to_dict())

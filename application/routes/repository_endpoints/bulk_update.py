"""Bulk update endpoint: several files, one commit."""

import logging

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service
from application.routes.repository_endpoints.models import BulkUpdateRequest
from application.services.github.models.types import FileChange

logger = logging.getLogger(__name__)


async def handle_bulk_update(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    Commit several files to the dedicated branch atomically.

    Request Body:
        {
            "files": [{"path": "content/blog/post.md", "content": "# Post"}],
            "message": "Update blog post"
        }

    Returns:
        201 with {"commit_hash", "parent_hash", "paths"}; 409 if the branch
        moved while the commit was being built
    """
    data: BulkUpdateRequest = request.validated_data
    changes = [FileChange(path=item.path, content=item.content) for item in data.files]

    result = await get_repository_service().commit_files(
        project_id, owner, repo, changes, data.message, user_id=current_user_id()
    )
    return APIResponse.created(result.to_dict())

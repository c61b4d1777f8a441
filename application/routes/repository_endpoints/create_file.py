"""Create file endpoint."""

from quart import request
from quart.typing import ResponseReturnValue

from application.routes.common.response import APIResponse
from application.routes.repository_endpoints.helpers import current_user_id, get_repository_service
from application.routes.repository_endpoints.models import CreateFileRequest


async def handle_create_file(project_id: str, owner: str, repo: str) -> ResponseReturnValue:
    """
    Create a new file on the dedicated branch; 409 if it already exists.

    Request Body:
        {"path": "content/blog/new.md", "content": "", "message": "Add new post"}
    """
    data: CreateFileRequest = request.validated_data
    message = data.message or f"Create {data.path.strip('/')}"

    result = await get_repository_service().create_file(
        project_id, owner, repo, data.path, data.content, message, user_id=current_user_id()
    )
    return APIResponse.created(result.to_dict())

"""Request models for repository endpoints."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from application.routes.common.constants import MAX_COMMIT_MESSAGE_LENGTH, MAX_FILES_PER_COMMIT


class PathQuery(BaseModel):
    """Query string of the read endpoints."""

    path: str = Field(default="", description="Repository path, relative to the root")


class FileUpdate(BaseModel):
    """One file of a bulk update."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1, description="File path, e.g. content/blog/post.md")
    content: str = Field(..., description="Full new file content (UTF-8 text)")


class BulkUpdateRequest(BaseModel):
    """Request model for committing several files at once."""

    files: List[FileUpdate] = Field(..., min_length=1, max_length=MAX_FILES_PER_COMMIT)
    message: str = Field(..., min_length=1, max_length=MAX_COMMIT_MESSAGE_LENGTH)


class CreateFileRequest(BaseModel):
    """Request model for creating one new file."""

    path: str = Field(..., min_length=1)
    content: str = Field(default="")
    message: Optional[str] = Field(default=None, max_length=MAX_COMMIT_MESSAGE_LENGTH)


class UpdateConfigRequest(BaseModel):
    """Request model for replacing the allowed directories."""

    allowed_directories: List[str] = Field(...)
    expected_hash: Optional[str] = Field(
        default=None,
        description="Policy hash returned by GET /config; the update fails with 409 if it changed",
    )


class RegisterInstallationRequest(BaseModel):
    """Request model for recording an organization's GitHub App installation."""

    installation_id: Union[int, str] = Field(...)

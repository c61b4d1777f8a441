"""
GitHub repository contents operations.

Provides methods to read files, list directory contents and write single
files through the contents API. Errors are raised as GitHubAPIError; callers
translate them at their own boundary.
"""

import base64
import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

from application.services.github.api.client import GitHubAPIClient
from application.services.github.models.types import RepositoryRef

logger = logging.getLogger(__name__)


class FileInfo:
    """Information about a file or directory in a repository."""

    def __init__(self, data: Dict[str, Any]):
        self.name: str = data.get("name", "")
        self.path: str = data.get("path", "")
        self.type: str = data.get("type", "")  # "file", "dir", "symlink" or "submodule"
        self.size: int = data.get("size", 0) or 0
        self.sha: str = data.get("sha", "")
        self._content: Optional[str] = data.get("content")
        self._encoding: str = data.get("encoding", "base64")

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_directory(self) -> bool:
        return self.type == "dir"

    @property
    def has_inline_content(self) -> bool:
        """False when GitHub omitted the content (files over 1 MB use encoding "none")."""
        return self._content is not None and self._encoding == "base64"

    def get_raw_content(self) -> Optional[bytes]:
        """Get undecoded file bytes, or None if the API response carried no content."""
        if not self.has_inline_content:
            return None
        return base64.b64decode(self._content)

    def __repr__(self) -> str:
        return f"FileInfo(name='{self.name}', type='{self.type}', path='{self.path}')"


def _contents_path(repo: RepositoryRef, path: str) -> str:
    return f"{repo.api_path}/contents/{quote(path.strip('/'), safe='/')}"


class ContentsOperations:
    """Handles GitHub repository contents operations."""

    def __init__(self, client: GitHubAPIClient):
        self.client = client

    async def get_contents(
        self, repo: RepositoryRef, path: str = "", ref: Optional[str] = None
    ) -> Union[FileInfo, List[FileInfo]]:
        """Get contents of a directory or file.

        Args:
            repo: Target repository
            path: Path to directory or file (empty string for root)
            ref: Git reference (branch, tag, commit SHA)

        Returns:
            A list of FileInfo for a directory, a single FileInfo otherwise
        """
        params = {"ref": ref} if ref else None
        response = await self.client.get(_contents_path(repo, path), params=params)

        if isinstance(response, list):
            return [FileInfo(item) for item in response]
        return FileInfo(response)

    async def put_file(
        self,
        repo: RepositoryRef,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or update one file on a branch.

        When sha is given GitHub only applies the write if it is still the
        file's current blob SHA (409 otherwise); without sha the write fails
        if the file already exists (422).

        Returns:
            Dict with the new "content_sha" and "commit_sha"
        """
        data: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            data["sha"] = sha

        response = await self.client.put(_contents_path(repo, path), data=data)

        logger.info(f"Wrote {path} to {repo.full_name}@{branch}")
        return {
            "content_sha": (response.get("content") or {}).get("sha", ""),
            "commit_sha": (response.get("commit") or {}).get("sha", ""),
        }

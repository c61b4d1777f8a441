"""
GitHub Git data API operations.

Thin wrappers around the low-level object endpoints (refs, blobs, trees,
commits). Errors are raised as GitHubAPIError.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

from application.services.github.api.client import GitHubAPIClient
from application.services.github.models.types import RepositoryRef, TreeEntry

logger = logging.getLogger(__name__)


class GitDataOperations:
    """Handles GitHub Git data (object database) operations."""

    def __init__(self, client: GitHubAPIClient):
        self.client = client

    async def get_branch_sha(self, repo: RepositoryRef, branch: str) -> str:
        """Return the commit SHA a branch ref points at."""
        response = await self.client.get(f"{repo.api_path}/git/ref/heads/{branch}")
        return response["object"]["sha"]

    async def create_branch(self, repo: RepositoryRef, branch: str, sha: str) -> None:
        """Create refs/heads/<branch> pointing at sha (422 if it already exists)."""
        await self.client.post(
            f"{repo.api_path}/git/refs",
            data={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        logger.info(f"Created branch {branch} in {repo.full_name} at {sha[:7]}")

    async def update_branch(self, repo: RepositoryRef, branch: str, sha: str) -> None:
        """Move a branch ref to sha without forcing.

        GitHub rejects the update with 422 when sha is not a descendant of the
        ref's current target.
        """
        await self.client.patch(
            f"{repo.api_path}/git/refs/heads/{branch}",
            data={"sha": sha, "force": False},
        )

    async def get_commit(self, repo: RepositoryRef, sha: str) -> Dict[str, Any]:
        return await self.client.get(f"{repo.api_path}/git/commits/{sha}")

    async def create_blob(self, repo: RepositoryRef, content: str) -> str:
        response = await self.client.post(
            f"{repo.api_path}/git/blobs",
            data={"content": content, "encoding": "utf-8"},
        )
        return response["sha"]

    async def get_blob(self, repo: RepositoryRef, sha: str) -> bytes:
        response = await self.client.get(f"{repo.api_path}/git/blobs/{sha}")
        if response.get("encoding") == "base64":
            return base64.b64decode(response.get("content", ""))
        return (response.get("content") or "").encode("utf-8")

    async def create_tree(
        self, repo: RepositoryRef, entries: List[TreeEntry], base_tree: Optional[str] = None
    ) -> str:
        data: Dict[str, Any] = {"tree": [entry.to_dict() for entry in entries]}
        if base_tree:
            data["base_tree"] = base_tree
        response = await self.client.post(f"{repo.api_path}/git/trees", data=data)
        return response["sha"]

    async def create_commit(
        self, repo: RepositoryRef, message: str, tree: str, parents: List[str]
    ) -> str:
        response = await self.client.post(
            f"{repo.api_path}/git/commits",
            data={"message": message, "tree": tree, "parents": parents},
        )
        return response["sha"]

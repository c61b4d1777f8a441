"""
GitHub repository operations.
"""

import logging
from typing import List

from application.services.github.api.client import GitHubAPIClient, GitHubAPIError
from application.services.github.models.types import RepositoryInfo, RepositoryRef
from common.constants import INSTALLATION_REPOS_PAGE_SIZE

logger = logging.getLogger(__name__)


class RepositoryOperations:
    """Handles GitHub repository operations."""

    def __init__(self, client: GitHubAPIClient):
        self.client = client

    async def get_repository(self, repo: RepositoryRef) -> RepositoryInfo:
        """Get repository information.

        Returns:
            RepositoryInfo with repository details

        Raises:
            GitHubAPIError: If request fails
        """
        response = await self.client.get(repo.api_path)
        return RepositoryInfo.from_api(response)

    async def branch_exists(self, repo: RepositoryRef, branch: str) -> bool:
        """Check whether a branch exists.

        Raises:
            GitHubAPIError: For any failure other than 404
        """
        try:
            await self.client.get(f"{repo.api_path}/branches/{branch}")
            return True
        except GitHubAPIError as e:
            if e.status_code == 404:
                return False
            raise

    async def list_installation_repositories(self) -> List[RepositoryInfo]:
        """List every repository the current installation token can access.

        Returns:
            Repositories sorted by most recent update first
        """
        repositories: List[RepositoryInfo] = []
        page = 1

        while True:
            response = await self.client.get(
                "installation/repositories",
                params={"per_page": INSTALLATION_REPOS_PAGE_SIZE, "page": page},
            )
            batch = response.get("repositories", [])
            repositories.extend(RepositoryInfo.from_api(item) for item in batch)

            total_count = response.get("total_count", len(repositories))
            if not batch or len(repositories) >= total_count:
                break
            page += 1

        repositories.sort(key=lambda info: info.updated_at or "", reverse=True)
        logger.info(f"Installation can access {len(repositories)} repositories")
        return repositories

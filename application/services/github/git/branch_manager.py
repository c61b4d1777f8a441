"""
Dedicated branch management.

The CMS reads and writes only its own long-lived branch. The branch is
created lazily from the default branch's current tip; the default branch
itself is never written.
"""

import logging

from application.services.github.api.client import GitHubAPIError
from application.services.github.api.errors import translate_github_error
from application.services.github.api.git_data import GitDataOperations
from application.services.github.api.repositories import RepositoryOperations
from application.services.github.models.types import RepositoryRef

logger = logging.getLogger(__name__)


class BranchManager:
    """Manages the dedicated CMS branch of one repository."""

    def __init__(
        self,
        repositories: RepositoryOperations,
        git_data: GitDataOperations,
        repo: RepositoryRef,
        branch: str,
    ):
        self.repositories = repositories
        self.git_data = git_data
        self.repo = repo
        self.branch = branch

    async def branch_exists(self) -> bool:
        try:
            return await self.repositories.branch_exists(self.repo, self.branch)
        except GitHubAPIError as e:
            raise translate_github_error(e, f"Checking branch '{self.branch}'") from e

    async def ensure_branch(self) -> bool:
        """
        Create the dedicated branch from the default branch if it is missing.

        Returns:
            True if this call created the branch, False if it already existed

        Raises:
            NotFoundError: If the repository or its default branch is absent
        """
        if await self.branch_exists():
            return False

        try:
            repository = await self.repositories.get_repository(self.repo)
            base_sha = await self.git_data.get_branch_sha(self.repo, repository.default_branch)
        except GitHubAPIError as e:
            raise translate_github_error(e, f"Resolving default branch of {self.repo.full_name}") from e

        try:
            await self.git_data.create_branch(self.repo, self.branch, base_sha)
        except GitHubAPIError as e:
            # Another request created it between the existence check and now
            if e.status_code == 422 and await self.branch_exists():
                logger.info(f"Branch {self.branch} was created concurrently in {self.repo.full_name}")
                return False
            raise translate_github_error(e, f"Creating branch '{self.branch}'") from e

        logger.info(
            f"Created dedicated branch {self.branch} in {self.repo.full_name} "
            f"from {repository.default_branch}"
        )
        return True

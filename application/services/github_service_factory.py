"""
GitHub Service Factory

Creates GitHubService instances bound to an organization's GitHub App
installation and one target repository.
"""

import logging
from typing import Optional, Union

from application.services.github.api.client import GitHubAPIClient
from application.services.github.auth.authenticator import InstallationAuthenticator
from application.services.github.github_service import GitHubService
from application.services.github.models.types import RepositoryRef
from application.services.github.retry import RetryPolicy
from common.config.config import CMS_BRANCH, CMS_CONFIG_FILE

logger = logging.getLogger(__name__)


class GitHubServiceFactory:
    """
    Factory for creating GitHubService instances.

    Holds the process-wide authenticator (and with it the installation
    token cache) plus the repository layout settings.
    """

    def __init__(
        self,
        authenticator: InstallationAuthenticator,
        branch: str = CMS_BRANCH,
        config_path: str = CMS_CONFIG_FILE,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.authenticator = authenticator
        self.branch = branch
        self.config_path = config_path
        self.retry_policy = retry_policy or RetryPolicy.from_config()

    async def create_client(self, installation_id: Union[str, int]) -> GitHubAPIClient:
        """
        Create an API client scoped to one installation.

        Raises:
            ValidationError: If installation_id is not numeric
            NotFoundError: If the installation does not exist
            ConfigurationError: If the App credentials are missing or rejected
        """
        return await self.authenticator.authenticate(installation_id)

    async def create_for_repository(
        self, installation_id: Union[str, int], repo: RepositoryRef
    ) -> GitHubService:
        """
        Create GitHubService for one repository of an installation.

        Args:
            installation_id: GitHub App installation ID of the owning organization
            repo: Target repository

        Returns:
            GitHubService pinned to the dedicated branch
        """
        client = await self.create_client(installation_id)
        logger.debug(
            f"Creating GitHub service for {repo.full_name} "
            f"(installation_id={installation_id}, branch={self.branch})"
        )
        return GitHubService(
            api_client=client,
            repo=repo,
            branch=self.branch,
            config_path=self.config_path,
            retry_policy=self.retry_policy,
        )

"""
Project repository service.

Entry point for content operations addressed by project. Each operation
checks the caller's project access, confirms the addressed repository is the
one linked to the project, resolves the organization's installation and then
delegates to a GitHubService, all under one caller-side timeout.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from application.services.github.api.client import GitHubAPIError
from application.services.github.api.errors import translate_github_error
from application.services.github.api.repositories import RepositoryOperations
from application.services.github.github_service import GitHubService
from application.services.github.models.types import (
    AccessType,
    CommitResult,
    DirectoryEntry,
    FileChange,
    FileContent,
    RepositoryInfo,
)
from application.services.github.repository.policy import RepositoryPolicy
from application.services.github_service_factory import GitHubServiceFactory
from application.services.projects.access_service import ProjectAccessService
from common.config.config import CMS_OPERATION_TIMEOUT
from common.exception.errors import ForbiddenError, OperationTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProjectRepositoryService:
    """Content operations on the repository linked to a project."""

    def __init__(
        self,
        access: ProjectAccessService,
        github_factory: GitHubServiceFactory,
        timeout: float = CMS_OPERATION_TIMEOUT,
    ):
        self.access = access
        self.github_factory = github_factory
        self.timeout = timeout

    async def _with_timeout(self, operation: Awaitable[T], description: str) -> T:
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{description} timed out after {self.timeout}s")
            raise OperationTimeoutError(f"{description} timed out") from None

    async def _service_for(
        self,
        project_id: str,
        owner: str,
        repo: str,
        user_id: str,
        access_type: AccessType = AccessType.BOTH,
    ) -> GitHubService:
        await self.access.check_access(project_id, user_id, access_type)
        link = await self.access.resolve_project_repo(project_id)
        if not link.repo.matches(owner, repo):
            logger.warning(
                f"Project {project_id} is linked to {link.repo.full_name}, not {owner}/{repo}"
            )
            raise ForbiddenError("Repository is not linked to this project")

        installation_id = await self.access.resolve_installation(link.org_id)
        return await self.github_factory.create_for_repository(installation_id, link.repo)

    async def _run(
        self,
        description: str,
        project_id: str,
        owner: str,
        repo: str,
        user_id: str,
        action: Callable[[GitHubService], Awaitable[T]],
        access_type: AccessType = AccessType.BOTH,
    ) -> T:
        async def run() -> T:
            service = await self._service_for(project_id, owner, repo, user_id, access_type)
            return await action(service)

        return await self._with_timeout(run(), description)

    async def list_directory(
        self, project_id: str, owner: str, repo: str, path: str, user_id: str
    ) -> List[DirectoryEntry]:
        return await self._run(
            f"Listing '{path}'", project_id, owner, repo, user_id,
            lambda service: service.list_directory(path),
        )

    async def read_file(
        self, project_id: str, owner: str, repo: str, path: str, user_id: str
    ) -> FileContent:
        return await self._run(
            f"Reading '{path}'", project_id, owner, repo, user_id,
            lambda service: service.read_file(path),
        )

    async def commit_files(
        self,
        project_id: str,
        owner: str,
        repo: str,
        files: Sequence[FileChange],
        message: str,
        user_id: str,
    ) -> CommitResult:
        result = await self._run(
            f"Committing {len(files)} file(s)", project_id, owner, repo, user_id,
            lambda service: service.commit_files(files, message),
        )
        logger.info(f"User {user_id} committed {result.commit_sha[:7]} to {owner}/{repo}")
        return result

    async def create_file(
        self,
        project_id: str,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        user_id: str,
    ) -> CommitResult:
        return await self._run(
            f"Creating '{path}'", project_id, owner, repo, user_id,
            lambda service: service.create_file(path, content, message),
        )

    async def get_policy(
        self, project_id: str, owner: str, repo: str, user_id: str
    ) -> RepositoryPolicy:
        return await self._run(
            "Reading repository policy", project_id, owner, repo, user_id,
            lambda service: service.get_policy(),
        )

    async def set_policy(
        self,
        project_id: str,
        owner: str,
        repo: str,
        allowed_directories: List[str],
        user_id: str,
        expected_sha: Optional[str] = None,
    ) -> RepositoryPolicy:
        """Replace the allowed directories; restricted to the organization owner."""
        return await self._run(
            "Updating repository policy", project_id, owner, repo, user_id,
            lambda service: service.set_policy(allowed_directories, expected_sha),
            access_type=AccessType.OWNER,
        )

    async def list_installation_repositories(
        self, org_id: str, user_id: str
    ) -> List[RepositoryInfo]:
        """Repositories the organization's installation can access, newest first."""

        async def run() -> List[RepositoryInfo]:
            await self.access.check_org_access(org_id, user_id)
            installation_id = await self.access.resolve_installation(org_id)
            client = await self.github_factory.create_client(installation_id)
            try:
                return await RepositoryOperations(client).list_installation_repositories()
            except GitHubAPIError as e:
                raise translate_github_error(e, "Listing installation repositories") from e

        return await self._with_timeout(run(), "Listing installation repositories")

    async def register_installation(self, org_id: str, installation_id: str, user_id: str):
        """Record an organization's installation after minting a token for it."""
        return await self._with_timeout(
            self.access.register_installation(
                org_id, installation_id, user_id, verify=self.github_factory.create_client
            ),
            "Registering installation",
        )

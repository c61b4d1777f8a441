"""
Main GitHub Service - facade for the content operations of one repository.

Every read and write is pinned to the dedicated CMS branch and checked
against the repository's allowed-directory policy before GitHub is touched:

- Directory listing and file reads
- Atomic multi-file commits and single-file creation
- Policy reads and updates
"""

import logging
from typing import List, Optional, Sequence

from application.services.github.accessor import ContentAccessor
from application.services.github.api.client import GitHubAPIClient
from application.services.github.api.contents import ContentsOperations
from application.services.github.api.git_data import GitDataOperations
from application.services.github.api.repositories import RepositoryOperations
from application.services.github.git.branch_manager import BranchManager
from application.services.github.git.commit_builder import AtomicCommitBuilder, validate_change_set
from application.services.github.git.object_store import GitHubObjectStore, GitObjectStore
from application.services.github.models.types import (
    CommitResult,
    DirectoryEntry,
    FileChange,
    FileContent,
    RepositoryRef,
)
from application.services.github.repository.config import RepositoryConfigStore
from application.services.github.repository.policy import (
    PolicyGate,
    RepositoryPolicy,
    validate_policy_directories,
)
from application.services.github.retry import NO_RETRY, RetryPolicy, retry_on_conflict
from common.config.config import CMS_BRANCH, CMS_CONFIG_FILE

logger = logging.getLogger(__name__)


class GitHubService:
    """
    Content operations on one repository through one installation client.

    Instances are cheap and built per request by GitHubServiceFactory.
    """

    def __init__(
        self,
        api_client: GitHubAPIClient,
        repo: RepositoryRef,
        branch: str = CMS_BRANCH,
        config_path: str = CMS_CONFIG_FILE,
        retry_policy: RetryPolicy = NO_RETRY,
        object_store: Optional[GitObjectStore] = None,
    ):
        """Initialize the service.

        Args:
            api_client: Installation-scoped API client
            repo: Target repository
            branch: Dedicated branch all operations are pinned to
            config_path: Location of the policy file on that branch
            retry_policy: Conflict retry for commits (default: none)
            object_store: Object store for commits (defaults to the Git data API)
        """
        self.api_client = api_client
        self.repo = repo
        self.branch = branch
        self.retry_policy = retry_policy

        self.repositories = RepositoryOperations(client=api_client)
        self.contents = ContentsOperations(client=api_client)
        self.git_data = GitDataOperations(client=api_client)

        self.branches = BranchManager(self.repositories, self.git_data, repo, branch)
        self.config_store = RepositoryConfigStore(
            self.contents, self.branches, repo, branch, config_path
        )
        self.accessor = ContentAccessor(self.contents, self.git_data, repo, branch)
        self.gate = PolicyGate(config_path)
        self.commit_builder = AtomicCommitBuilder(
            object_store or GitHubObjectStore(self.git_data, repo, self.contents), branch
        )

    async def list_directory(self, path: str) -> List[DirectoryEntry]:
        policy = await self.config_store.read_config()
        normalized = self.gate.check(policy, path)
        return await self.accessor.list_directory(normalized)

    async def read_file(self, path: str) -> FileContent:
        policy = await self.config_store.read_config()
        normalized = self.gate.check(policy, path)
        return await self.accessor.read_file(normalized)

    async def commit_files(self, changes: Sequence[FileChange], message: str) -> CommitResult:
        """
        Commit a batch of files as one commit on the dedicated branch.

        The whole batch is checked against the policy before any Git object
        is created. Under a retry policy each attempt re-reads the policy and
        the branch tip.

        Raises:
            ValidationError: If the batch is malformed
            ForbiddenError: If any path is outside the allowed directories
            ConflictError: If the branch moved during the last attempt
        """
        validated = validate_change_set(changes, message)

        async def attempt() -> CommitResult:
            policy = await self.config_store.read_config()
            self.gate.check_all(policy, [change.path for change in validated])
            return await self.commit_builder.commit(validated, message)

        return await retry_on_conflict(
            attempt, self.retry_policy, description=f"Commit to {self.repo.full_name}"
        )

    async def create_file(self, path: str, content: str, message: str) -> CommitResult:
        """
        Create one new file through the commit builder.

        Existence is checked against the commit the new one is built on, so a
        file written by someone else first either shows up in that check or
        moves the branch and fails the ref CAS.

        Raises:
            ConflictError: If the file already exists on the dedicated branch
        """
        validated = validate_change_set([FileChange(path=path, content=content)], message)

        policy = await self.config_store.read_config()
        self.gate.check(policy, validated[0].path)

        return await self.commit_builder.commit(validated, message, create_only=True)

    async def get_policy(self) -> RepositoryPolicy:
        """Return the policy, creating the dedicated branch and policy file if missing."""
        return await self.config_store.ensure_config()

    async def set_policy(
        self, directories: List[str], expected_sha: Optional[str] = None
    ) -> RepositoryPolicy:
        """
        Replace the allowed directories.

        Args:
            directories: New allowed directories, stored exactly as given
            expected_sha: Policy file SHA the caller read; a mismatch raises
                ConflictError

        Raises:
            ValidationError: If an entry is empty or holds . or .. segments
            ConflictError: If the policy changed since expected_sha
        """
        directories = validate_policy_directories(directories)
        current = await self.config_store.ensure_config()
        return await self.config_store.write_config(
            RepositoryPolicy(directories=directories),
            expected_sha=expected_sha or current.sha,
        )

"""
Git object store abstraction used by the atomic commit builder.

The commit builder only needs a handful of object-database primitives. They
are expressed as an abstract store so the builder can run against GitHub's
Git data API in production and against an in-memory store in tests.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from application.services.github.api.client import GitHubAPIError
from application.services.github.api.contents import ContentsOperations
from application.services.github.api.errors import translate_github_error
from application.services.github.api.git_data import GitDataOperations
from application.services.github.models.types import EntryType, RepositoryRef, TreeEntry
from common.exception.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class GitObjectStore(ABC):
    """Object database of one repository.

    Blobs, trees and commits are immutable and content addressed; creating
    them is invisible to readers. Only update_branch changes what readers see.
    """

    @abstractmethod
    async def get_branch_head(self, branch: str) -> str:
        """Return the commit SHA the branch points at (NotFoundError if missing)."""

    @abstractmethod
    async def get_commit_tree(self, commit_sha: str) -> str:
        """Return the root tree SHA of a commit."""

    @abstractmethod
    async def get_entry_type(self, commit_sha: str, path: str) -> Optional[EntryType]:
        """Return what path is in the commit's tree, or None if nothing is there."""

    @abstractmethod
    async def create_blob(self, content: str) -> str:
        """Store UTF-8 text as a blob and return its SHA."""

    @abstractmethod
    async def create_tree(self, base_tree: str, entries: List[TreeEntry]) -> str:
        """Create a tree layered on base_tree with entries added or replaced."""

    @abstractmethod
    async def create_commit(self, message: str, tree_sha: str, parents: List[str]) -> str:
        """Create a commit object and return its SHA."""

    @abstractmethod
    async def update_branch(self, branch: str, new_sha: str, expected_sha: str) -> None:
        """Compare-and-swap the branch from expected_sha to new_sha.

        Raises:
            ConflictError: If the branch no longer points at expected_sha
        """


class GitHubObjectStore(GitObjectStore):
    """GitObjectStore backed by the GitHub Git data API."""

    def __init__(
        self,
        git_data: GitDataOperations,
        repo: RepositoryRef,
        contents: Optional[ContentsOperations] = None,
    ):
        self.git_data = git_data
        self.repo = repo
        self.contents = contents or ContentsOperations(client=git_data.client)

    async def get_branch_head(self, branch: str) -> str:
        try:
            return await self.git_data.get_branch_sha(self.repo, branch)
        except GitHubAPIError as e:
            raise translate_github_error(
                e, f"Reading branch '{branch}' of {self.repo.full_name}"
            ) from e

    async def get_commit_tree(self, commit_sha: str) -> str:
        try:
            commit = await self.git_data.get_commit(self.repo, commit_sha)
        except GitHubAPIError as e:
            raise translate_github_error(e, f"Reading commit {commit_sha[:7]}") from e
        return commit["tree"]["sha"]

    async def get_entry_type(self, commit_sha: str, path: str) -> Optional[EntryType]:
        try:
            result = await self.contents.get_contents(self.repo, path, ref=commit_sha)
        except GitHubAPIError as e:
            if e.status_code == 404:
                return None
            raise translate_github_error(e, f"Checking '{path}' at {commit_sha[:7]}") from e

        if isinstance(result, list) or result.is_directory:
            return EntryType.DIR
        # Symlinks and submodules are replaced like files
        return EntryType.FILE

    async def create_blob(self, content: str) -> str:
        try:
            return await self.git_data.create_blob(self.repo, content)
        except GitHubAPIError as e:
            raise translate_github_error(e, "Creating blob") from e

    async def create_tree(self, base_tree: str, entries: List[TreeEntry]) -> str:
        try:
            return await self.git_data.create_tree(self.repo, entries, base_tree=base_tree)
        except GitHubAPIError as e:
            raise translate_github_error(e, "Creating tree") from e

    async def create_commit(self, message: str, tree_sha: str, parents: List[str]) -> str:
        try:
            return await self.git_data.create_commit(self.repo, message, tree_sha, parents)
        except GitHubAPIError as e:
            raise translate_github_error(e, "Creating commit") from e

    async def update_branch(self, branch: str, new_sha: str, expected_sha: str) -> None:
        """Advance the branch with a non-forced ref update.

        GitHub has no explicit expected-value parameter on ref updates. The
        current head is compared first, and the update itself is sent without
        force, so GitHub refuses it (422) unless new_sha descends from the
        head at that moment. new_sha's only parent is expected_sha, so a head
        that moved forward in between is rejected.
        """
        try:
            current = await self.git_data.get_branch_sha(self.repo, branch)
        except GitHubAPIError as e:
            raise translate_github_error(e, f"Reading branch '{branch}'") from e

        if current != expected_sha:
            raise ConflictError(
                f"Branch '{branch}' moved from {expected_sha[:7]} to {current[:7]}"
            )

        try:
            await self.git_data.update_branch(self.repo, branch, new_sha)
        except GitHubAPIError as e:
            raise translate_github_error(
                e,
                f"Branch '{branch}' was updated concurrently",
                overrides={422: ConflictError, 404: NotFoundError},
            ) from e

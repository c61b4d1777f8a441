"""
Repository configuration store.

The allowed-directory policy lives in the target repository itself, as a YAML
document on the dedicated CMS branch. Reads fail closed; writes are single-file
commits guarded by the file's blob SHA.
"""

import logging
from typing import Optional

import yaml

from application.services.github.api.client import GitHubAPIError
from application.services.github.api.contents import ContentsOperations, FileInfo
from application.services.github.api.errors import translate_github_error
from application.services.github.git.branch_manager import BranchManager
from application.services.github.models.types import RepositoryRef
from application.services.github.repository.policy import RepositoryPolicy
from common.constants import INITIALIZE_CONFIG_MESSAGE, UPDATE_CONFIG_MESSAGE
from common.exception.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def serialize_policy(policy: RepositoryPolicy) -> str:
    return yaml.safe_dump(policy.to_document(), default_flow_style=False, sort_keys=False)


def parse_policy(text: str, sha: Optional[str] = None) -> RepositoryPolicy:
    """Parse a policy document; unparseable YAML yields the empty policy."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.warning(f"Repository policy is not valid YAML; denying all paths: {e}")
        return RepositoryPolicy(directories=[], sha=sha)
    return RepositoryPolicy.from_document(document, sha=sha)


class RepositoryConfigStore:
    """Reads and writes the policy file of one repository."""

    def __init__(
        self,
        contents: ContentsOperations,
        branch_manager: BranchManager,
        repo: RepositoryRef,
        branch: str,
        config_path: str,
    ):
        self.contents = contents
        self.branch_manager = branch_manager
        self.repo = repo
        self.branch = branch
        self.config_path = config_path

    async def _fetch(self) -> Optional[RepositoryPolicy]:
        """Fetch the policy file, returning None when it does not exist.

        Raises:
            CMSError: For failures other than a missing file
        """
        try:
            info = await self.contents.get_contents(self.repo, self.config_path, ref=self.branch)
        except GitHubAPIError as e:
            if e.status_code == 404:
                return None
            raise translate_github_error(e, f"Reading {self.config_path}") from e

        if not isinstance(info, FileInfo) or not info.is_file:
            logger.warning(f"{self.config_path} in {self.repo.full_name} is not a file; denying all paths")
            return RepositoryPolicy(directories=[])

        raw = info.get_raw_content()
        if raw is None:
            logger.warning(f"{self.config_path} in {self.repo.full_name} has no inline content")
            return RepositoryPolicy(directories=[], sha=info.sha)

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"{self.config_path} in {self.repo.full_name} is not UTF-8; denying all paths")
            return RepositoryPolicy(directories=[], sha=info.sha)

        return parse_policy(text, sha=info.sha)

    async def read_config(self) -> RepositoryPolicy:
        """
        Read the policy from the dedicated branch.

        Never raises: a missing branch or file, a fetch failure or a malformed
        document all produce the empty policy, which denies every path.
        """
        try:
            policy = await self._fetch()
        except Exception as e:
            logger.warning(
                f"Could not read policy of {self.repo.full_name}; denying all paths: {e}"
            )
            return RepositoryPolicy.empty()

        if policy is None:
            logger.warning(f"No policy file in {self.repo.full_name}@{self.branch}; denying all paths")
            return RepositoryPolicy.empty()
        return policy

    async def ensure_config(self) -> RepositoryPolicy:
        """
        Make sure the dedicated branch and the policy file exist.

        Creates only what is missing, so repeated calls on an initialized
        repository perform reads only.

        Returns:
            The current policy
        """
        await self.branch_manager.ensure_branch()

        policy = await self._fetch()
        if policy is not None:
            return policy

        empty = RepositoryPolicy.empty()
        try:
            result = await self.contents.put_file(
                self.repo,
                self.config_path,
                serialize_policy(empty),
                INITIALIZE_CONFIG_MESSAGE,
                self.branch,
            )
        except GitHubAPIError as e:
            # 422 without a sha means the file appeared since the read above
            if e.status_code in (409, 422):
                logger.info(f"{self.config_path} was created concurrently in {self.repo.full_name}")
                policy = await self._fetch()
                if policy is not None:
                    return policy
            raise translate_github_error(e, f"Creating {self.config_path}") from e

        logger.info(f"Initialized {self.config_path} in {self.repo.full_name}@{self.branch}")
        return RepositoryPolicy(directories=[], sha=result["content_sha"])

    async def write_config(
        self, policy: RepositoryPolicy, expected_sha: Optional[str] = None
    ) -> RepositoryPolicy:
        """
        Commit a new policy as a single file update.

        Args:
            policy: Policy to store
            expected_sha: Blob SHA the caller last read; defaults to policy.sha,
                then to the file's current SHA

        Returns:
            The stored policy carrying the new blob SHA

        Raises:
            ConflictError: If the file changed since expected_sha was read
            NotFoundError: If the dedicated branch does not exist
        """
        sha = expected_sha or policy.sha
        if sha is None:
            current = await self._fetch()
            sha = current.sha if current is not None else None

        try:
            result = await self.contents.put_file(
                self.repo,
                self.config_path,
                serialize_policy(policy),
                UPDATE_CONFIG_MESSAGE,
                self.branch,
                sha=sha,
            )
        except GitHubAPIError as e:
            raise translate_github_error(
                e,
                f"Writing {self.config_path}",
                overrides={409: ConflictError, 422: ConflictError, 404: NotFoundError},
            ) from e

        logger.info(
            f"Updated {self.config_path} in {self.repo.full_name}@{self.branch}: "
            f"{len(policy.directories)} allowed directories"
        )
        return RepositoryPolicy(directories=list(policy.directories), sha=result["content_sha"])

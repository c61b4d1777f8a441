"""
Repository URL parsing.

Projects link their content repository as a GitHub URL or an owner/repo
shorthand; this module turns either form into a RepositoryRef.
"""

import logging
import re
from dataclasses import dataclass

from application.services.github.models.types import RepositoryRef
from common.exception.errors import ValidationError

logger = logging.getLogger(__name__)

_HTTPS_PATTERN = re.compile(r"^https?://(?:www\.)?github\.com/([^/]+)/([^/]+)$")
_SSH_PATTERN = re.compile(r"^git@github\.com:([^/]+)/([^/]+)$")
_SHORT_PATTERN = re.compile(r"^([^/\s:]+)/([^/\s]+)$")


@dataclass
class RepositoryURLInfo:
    """Information extracted from a repository link."""

    owner: str
    repo_name: str
    original_url: str
    is_ssh: bool

    def to_https_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo_name}"

    def to_ref(self) -> RepositoryRef:
        return RepositoryRef(owner=self.owner, name=self.repo_name)


def parse_repository_url(url: str) -> RepositoryURLInfo:
    """
    Parse a GitHub repository link.

    Supported formats:
    - HTTPS: https://github.com/owner/repo (optionally ending in .git or /)
    - SSH: git@github.com:owner/repo.git
    - Short: owner/repo

    Raises:
        ValidationError: If the link is empty or in none of these formats
    """
    if not url or not url.strip():
        raise ValidationError("Repository link cannot be empty", field="github_repo_link")

    cleaned = url.strip().rstrip("/")
    if cleaned.endswith(".git"):
        cleaned = cleaned[: -len(".git")]

    for pattern, is_ssh in ((_HTTPS_PATTERN, False), (_SSH_PATTERN, True), (_SHORT_PATTERN, False)):
        match = pattern.match(cleaned)
        if match:
            owner, repo = match.groups()
            return RepositoryURLInfo(owner=owner, repo_name=repo, original_url=url, is_ssh=is_ssh)

    raise ValidationError(
        f"Invalid GitHub repository link: {url}. "
        f"Supported formats: https://github.com/owner/repo, git@github.com:owner/repo, owner/repo",
        field="github_repo_link",
    )


def extract_owner_and_repo(url: str) -> RepositoryRef:
    return parse_repository_url(url).to_ref()

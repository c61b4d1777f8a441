"""
GitHub API Module

Handles GitHub REST API interactions including:
- Repository contents (read, single-file write)
- Git data objects (refs, blobs, trees, commits)
- Repository and installation metadata
"""

from application.services.github.api.client import GitHubAPIClient, GitHubAPIError
from application.services.github.api.contents import ContentsOperations, FileInfo
from application.services.github.api.git_data import GitDataOperations
from application.services.github.api.repositories import RepositoryOperations

__all__ = [
    "GitHubAPIClient",
    "GitHubAPIError",
    "ContentsOperations",
    "FileInfo",
    "GitDataOperations",
    "RepositoryOperations",
]

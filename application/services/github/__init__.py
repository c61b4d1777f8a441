"""
GitHub Service Package

GitHub repository as the content store of the CMS.

Main Components:
- GitHubService: Facade for the content operations of one repository
- Auth: GitHub App credentials and installation tokens
- API Client: GitHub REST API interactions
- Git: Atomic commits on the dedicated branch
- Repository: Allowed-directory policy and its storage
"""

from application.services.github.github_service import GitHubService

__all__ = ["GitHubService"]

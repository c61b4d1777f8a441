"""
GitHub App Authentication Module

Handles GitHub App authentication including:
- App identity (ID + private key)
- JWT token generation for GitHub App
- Installation access token management
- Token caching and refresh
"""

from application.services.github.auth.authenticator import (
    InstallationAuthenticator,
    parse_installation_id,
)
from application.services.github.auth.credentials import GitHubAppCredentials
from application.services.github.auth.installation_token_manager import (
    InstallationToken,
    InstallationTokenManager,
)
from application.services.github.auth.jwt_generator import GitHubAppJWTGenerator

__all__ = [
    "GitHubAppCredentials",
    "GitHubAppJWTGenerator",
    "InstallationAuthenticator",
    "InstallationToken",
    "InstallationTokenManager",
    "parse_installation_id",
]

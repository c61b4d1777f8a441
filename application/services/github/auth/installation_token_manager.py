"""
GitHub App Installation Access Token Manager

Manages installation access tokens for GitHub App authentication.
Handles token generation, caching, and automatic refresh.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx

from application.services.github.auth.jwt_generator import GitHubAppJWTGenerator
from common.config.config import GITHUB_API_URL, GITHUB_API_VERSION, GITHUB_REQUEST_TIMEOUT
from common.constants import INSTALLATION_TOKEN_REFRESH_BUFFER_SECONDS
from common.exception.errors import ConfigurationError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class InstallationToken:
    """Represents a GitHub App installation access token."""

    token: str
    expires_at: str  # ISO 8601 format
    permissions: Dict[str, str] = field(default_factory=dict)
    repository_selection: str = "all"

    def is_expired(self, buffer_seconds: int = INSTALLATION_TOKEN_REFRESH_BUFFER_SECONDS) -> bool:
        """
        Check if token is expired or will expire soon.

        Args:
            buffer_seconds: Consider token expired this many seconds before actual expiration

        Returns:
            True if token is expired or will expire within buffer
        """
        try:
            expires_at = datetime.fromisoformat(self.expires_at.replace("Z", "+00:00"))
        except ValueError as e:
            logger.warning(f"Failed to parse token expiration: {e}")
            return True

        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        time_until_expiry = (expires_at - datetime.now(timezone.utc)).total_seconds()
        return time_until_expiry <= buffer_seconds


class InstallationTokenManager:
    """Manages GitHub App installation access tokens with caching."""

    def __init__(
        self,
        jwt_generator: GitHubAppJWTGenerator,
        base_url: str = GITHUB_API_URL,
        timeout: float = GITHUB_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize installation token manager.

        Args:
            jwt_generator: Signs the App JWT used to mint installation tokens
            base_url: GitHub REST API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.jwt_generator = jwt_generator
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._token_cache: Dict[int, InstallationToken] = {}
        # Mints are serialized per installation
        self._locks: Dict[int, asyncio.Lock] = {}

    async def get_installation_token(self, installation_id: int) -> str:
        """
        Get installation access token for a GitHub App installation.

        Uses cached token if available and not about to expire, otherwise
        requests a new one.

        Args:
            installation_id: GitHub App installation ID

        Returns:
            Installation access token as string

        Raises:
            NotFoundError: If the installation does not exist
            ConfigurationError: If GitHub rejects the App credentials
            UpstreamError: If the request fails for any other reason
        """
        lock = self._locks.setdefault(installation_id, asyncio.Lock())
        async with lock:
            cached_token = self._token_cache.get(installation_id)

            if cached_token and not cached_token.is_expired():
                logger.debug(f"Using cached installation token for installation {installation_id}")
                return cached_token.token

            logger.info(f"Requesting new installation token for installation {installation_id}")
            token = await self._request_installation_token(installation_id)

            self._token_cache[installation_id] = token

            return token.token

    async def _request_installation_token(self, installation_id: int) -> InstallationToken:
        """Request a new installation access token from GitHub API."""
        jwt_token = self.jwt_generator.generate_jwt()

        url = f"{self.base_url}/app/installations/{installation_id}/access_tokens"
        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

        try:
            timeout_config = httpx.Timeout(self.timeout, connect=10.0)
            async with httpx.AsyncClient(
                timeout=timeout_config, trust_env=False, transport=self._transport
            ) as client:
                response = await client.post(url, json={}, headers=headers)

        except httpx.RequestError as e:
            error_msg = f"Network error requesting installation token: {e}"
            logger.error(error_msg)
            raise UpstreamError(error_msg) from e

        if response.status_code == 201:
            response_data = response.json()

            token = InstallationToken(
                token=response_data["token"],
                expires_at=response_data["expires_at"],
                permissions=response_data.get("permissions", {}),
                repository_selection=response_data.get("repository_selection", "all"),
            )

            logger.info(
                f"Obtained installation token for installation {installation_id} "
                f"(expires at {token.expires_at}, permissions: {list(token.permissions.keys())})"
            )

            return token

        if response.status_code == 404:
            logger.warning(f"GitHub App installation {installation_id} not found")
            raise NotFoundError(f"GitHub App installation {installation_id} not found")

        if response.status_code == 401:
            logger.error("GitHub rejected the App JWT; check GITHUB_APP_ID and the private key")
            raise ConfigurationError("GitHub App credentials were rejected by GitHub")

        error_msg = f"Failed to get installation token (status {response.status_code}): {response.text}"
        logger.error(error_msg)
        raise UpstreamError(error_msg)

    def clear_cache(self, installation_id: Optional[int] = None):
        """
        Clear token cache.

        Args:
            installation_id: If provided, clear only this installation's token.
                           If None, clear all cached tokens.
        """
        if installation_id is not None:
            if installation_id in self._token_cache:
                del self._token_cache[installation_id]
                logger.info(f"Cleared cached token for installation {installation_id}")
        else:
            self._token_cache.clear()
            logger.info("Cleared all cached installation tokens")
